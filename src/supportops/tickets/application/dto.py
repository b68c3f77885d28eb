"""
Tickets Application DTOs
========================

Data Transfer Objects for the ticket API and real-time events.

Pydantic models for request/response validation. The wire format uses
camelCase keys (``createdAt``, ``suggestedReply``).
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel

from supportops.tickets.domain import Ticket


PriorityStr = Literal["low", "medium", "high", "urgent"]


# ========== Request DTOs ==========

class CreateTicketRequest(BaseModel):
    """Request model for ticket creation. Emptiness is checked by the service."""
    model_config = ConfigDict(extra="ignore")

    title: Optional[StrictStr] = Field(None, description="Ticket title")


# ========== Response DTOs ==========

class TicketDTO(BaseModel):
    """A ticket as returned by the API and pushed to real-time clients."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    status: str
    created_at: datetime
    priority: PriorityStr
    suggested_reply: str

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "TicketDTO":
        """Create from domain entity."""
        return cls(
            id=ticket.id,
            title=ticket.title,
            status=ticket.status,
            created_at=ticket.created_at,
            priority=ticket.priority,
            suggested_reply=ticket.suggested_reply
        )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx responses."""
    error: str
    correlation_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Liveness check response."""
    status: str
    version: str
    environment: str
    checks: Dict[str, Any] = Field(default_factory=dict)


# ========== Real-time event DTOs ==========

class InitEventData(BaseModel):
    """Snapshot sent to a client right after it connects."""
    tickets: List[TicketDTO]

