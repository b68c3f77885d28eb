"""
Bounded Waits
=============

Wraps an awaitable in a timeout and reports the result as a value/error
union instead of raising, so callers with a fallback path can branch on
the outcome.

Usage:
    outcome = await bounded(client.generate(prompt), timeout_seconds=25)
    if not outcome.ok:
        return fallback
    text = outcome.value
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a bounded wait: either ``value`` or ``error`` is meaningful."""
    value: Optional[T] = None
    error: Optional[Exception] = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def describe_error(self) -> str:
        if self.ok:
            return ""
        if self.timed_out:
            return "timed out"
        return str(self.error) or type(self.error).__name__


async def bounded(awaitable: Awaitable[T], timeout_seconds: float) -> Outcome[T]:
    """
    Await ``awaitable`` for at most ``timeout_seconds``.

    Cancellation of the calling task is propagated, every other exception
    is captured in the returned Outcome.
    """
    try:
        value = await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        return Outcome(error=e, timed_out=True)
    except Exception as e:
        return Outcome(error=e)
    return Outcome(value=value)
