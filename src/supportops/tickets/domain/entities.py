"""
Tickets Domain Entities
=======================

The ticket record and its identifier sequence.
"""

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from supportops.config import DEFAULT_PRIORITY, VALID_PRIORITIES, TicketStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Ticket:
    """
    A support request.

    Built once, after triage, and never mutated afterwards.
    """
    id: int
    title: str
    status: str = TicketStatus.NEW
    created_at: datetime = field(default_factory=_utcnow)
    priority: str = DEFAULT_PRIORITY
    suggested_reply: str = ""

    def __post_init__(self):
        if not self.title:
            raise ValueError("title must not be empty")
        if self.priority not in VALID_PRIORITIES:
            raise ValueError(f"priority must be one of {VALID_PRIORITIES}")


class TicketIdSequence:
    """
    Time-ordered, strictly increasing ticket ids.

    Each id is the current wall clock in milliseconds, bumped past the
    previous id when two tickets are created within the same millisecond.
    """

    def __init__(
        self,
        start_after: int = 0,
        clock_ms: Callable[[], int] = lambda: time.time_ns() // 1_000_000
    ):
        self._last = start_after
        self._clock_ms = clock_ms
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            self._last = max(self._clock_ms(), self._last + 1)
            return self._last
