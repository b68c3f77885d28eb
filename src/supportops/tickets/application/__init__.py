"""
Tickets Application Layer
=========================

Contains:
- Services: TicketService
- DTOs: Data transfer objects for API and event serialization
- Interfaces: repository and notifier abstractions
"""

from supportops.tickets.application.dto import (
    CreateTicketRequest,
    TicketDTO,
    ErrorResponse,
    HealthResponse,
    InitEventData,
)
from supportops.tickets.application.services import (
    TicketService,
    ITicketRepository,
    ITicketNotifier,
)

__all__ = [
    # DTOs
    "CreateTicketRequest",
    "TicketDTO",
    "ErrorResponse",
    "HealthResponse",
    "InitEventData",
    # Services
    "TicketService",
    # Interfaces
    "ITicketRepository",
    "ITicketNotifier",
]
