"""
Tickets Application Services
============================

Application service for ticket intake.

Orchestrates validation, triage, storage and notification. The store and
the notifier are separate collaborators, so persistence never knows about
transport.
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, List

from supportops.config import TicketStatus
from supportops.core import ValidationException
from supportops.tickets.domain import Ticket, TicketIdSequence
from supportops.triage.application import ITriageService
from supportops.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)


# ========== Repository / Notifier Interfaces ==========

class ITicketRepository(ABC):
    """Interface for ticket storage. Ordered newest first."""

    @abstractmethod
    async def list_all(self) -> List[Ticket]:
        """Return every ticket, newest first."""

    @abstractmethod
    async def add(self, ticket: Ticket) -> Ticket:
        """Store a new ticket at the front."""

    @abstractmethod
    async def count(self) -> int:
        """Number of stored tickets."""


class ITicketNotifier(ABC):
    """Interface for publishing ticket events."""

    @abstractmethod
    async def ticket_created(self, ticket: Ticket) -> None:
        """Publish a newly created ticket."""


# ========== Application Services ==========

class TicketService:
    """
    Service for listing and creating tickets.

    Coordinates between the repository, the triage adapter and the notifier.
    """

    def __init__(
        self,
        repository: ITicketRepository,
        triage: ITriageService,
        notifier: ITicketNotifier,
        id_sequence: TicketIdSequence
    ):
        self._repository = repository
        self._triage = triage
        self._notifier = notifier
        self._ids = id_sequence

    async def list_tickets(self) -> List[Ticket]:
        return await self._repository.list_all()

    async def create_ticket(self, title: Any) -> Ticket:
        """
        Validate ``title``, triage it and store the resulting ticket.

        Raises:
            ValidationException: title missing, not a string, or empty.
                The store is left untouched.
        """
        if not isinstance(title, str) or not title:
            raise ValidationException("title required")

        start_time = time.perf_counter()
        ticket_id = self._ids.next_id()
        created_at = datetime.now(timezone.utc)

        with log_latency(logger, "triage", ticket_id=ticket_id):
            triage = await self._triage.triage(title)

        ticket = Ticket(
            id=ticket_id,
            title=title,
            status=TicketStatus.NEW,
            created_at=created_at,
            priority=triage.priority,
            suggested_reply=triage.suggested_reply
        )
        await self._repository.add(ticket)

        logger.info(
            "Ticket created",
            extra={
                "ticket_id": ticket.id,
                "priority": ticket.priority,
                "enriched": triage.enriched,
                "processing_time_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )

        await self._notifier.ticket_created(ticket)
        return ticket
