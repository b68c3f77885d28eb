"""
Tickets Infrastructure Layer
============================

Contains:
- Repositories: in-memory ticket store
- Notifier: WebSocket broadcaster
"""

from supportops.tickets.infrastructure.repositories import (
    InMemoryTicketRepository,
    sample_ticket,
)
from supportops.tickets.infrastructure.notifier import WebSocketBroadcaster

__all__ = [
    "InMemoryTicketRepository",
    "sample_ticket",
    "WebSocketBroadcaster",
]
