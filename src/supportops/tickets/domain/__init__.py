"""
Tickets Domain Layer
====================

Contains:
- Entities: Ticket
- Identifier generation: TicketIdSequence
"""

from supportops.tickets.domain.entities import Ticket, TicketIdSequence

__all__ = [
    "Ticket",
    "TicketIdSequence",
]
