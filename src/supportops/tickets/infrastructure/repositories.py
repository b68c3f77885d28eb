"""
Tickets Infrastructure Repositories
====================================

In-memory implementation of the ticket repository.
"""

from typing import Iterable, List, Optional

from supportops.tickets.application import ITicketRepository
from supportops.tickets.domain import Ticket


class InMemoryTicketRepository(ITicketRepository):
    """
    Process-local ticket list, newest first.

    Mutations run synchronously on the event loop, so no locking is needed.
    """

    def __init__(self, initial: Optional[Iterable[Ticket]] = None):
        self._tickets: List[Ticket] = list(initial or [])

    async def list_all(self) -> List[Ticket]:
        return list(self._tickets)

    async def add(self, ticket: Ticket) -> Ticket:
        self._tickets.insert(0, ticket)
        return ticket

    async def count(self) -> int:
        return len(self._tickets)


SAMPLE_TICKET_ID = 1
SAMPLE_TICKET_TITLE = "Sample ticket: internet down"


def sample_ticket() -> Ticket:
    """The demo row the store starts with."""
    return Ticket(id=SAMPLE_TICKET_ID, title=SAMPLE_TICKET_TITLE)
