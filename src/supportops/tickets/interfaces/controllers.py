"""
Tickets Controllers (API Routes)
================================

FastAPI routes for ticket intake and the real-time event socket.

Controllers delegate to application services.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, WebSocket, status
from pydantic import ValidationError

from supportops.core import ValidationException
from supportops.tickets.application import (
    TicketService,
    CreateTicketRequest,
    TicketDTO,
    ErrorResponse,
)
from supportops.tickets.infrastructure import WebSocketBroadcaster
from supportops.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["Tickets"])
realtime_router = APIRouter(tags=["Realtime"])


# ========== Example payloads for Swagger ==========

CREATE_REQUEST_EXAMPLE = {
    "title": "printer jam"
}

TICKET_RESPONSE_EXAMPLE = {
    "id": 1760870400000,
    "title": "printer jam",
    "status": "new",
    "createdAt": "2026-10-19T10:00:00Z",
    "priority": "medium",
    "suggestedReply": "Sorry about the printer jam. Please open the rear tray and remove any stuck paper."
}


# ========== Dependencies ==========

def get_ticket_service(request: Request) -> TicketService:
    """Get the ticket service from app state."""
    return request.app.state.ticket_service


async def _read_create_request(request: Request) -> CreateTicketRequest:
    """Parse the body leniently so every malformed payload maps to 400."""
    try:
        body = await request.json()
    except ValueError:
        raise ValidationException("title required")
    if not isinstance(body, dict):
        raise ValidationException("title required")
    try:
        return CreateTicketRequest.model_validate(body)
    except ValidationError:
        raise ValidationException("title required")


# ========== Route Handlers ==========

@router.get(
    "/tickets",
    response_model=List[TicketDTO],
    summary="List all tickets, newest first",
    responses={
        200: {
            "description": "Full ticket list (no pagination)",
            "content": {"application/json": {"example": [TICKET_RESPONSE_EXAMPLE]}}
        }
    }
)
async def list_tickets(service: TicketService = Depends(get_ticket_service)):
    tickets = await service.list_tickets()
    return [TicketDTO.from_domain(t) for t in tickets]


@router.post(
    "/tickets",
    response_model=TicketDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create a ticket",
    description="""
    Create a support ticket from a title.

    The title is sent to the AI triage model for a priority
    (`low`, `medium`, `high`, `urgent`) and a suggested reply. If the model
    is slow or unavailable the ticket is still created with
    `priority: "medium"` and an empty `suggestedReply`.

    The new ticket is pushed to every client connected on `/ws` as a
    `ticket:new` event.
    """,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": CreateTicketRequest.model_json_schema(),
                    "example": CREATE_REQUEST_EXAMPLE
                }
            }
        }
    },
    responses={
        201: {
            "description": "Ticket created",
            "content": {"application/json": {"example": TICKET_RESPONSE_EXAMPLE}}
        },
        400: {"model": ErrorResponse, "description": "Missing or empty title"},
        500: {"model": ErrorResponse, "description": "Internal error"}
    }
)
async def create_ticket(
    request: Request,
    service: TicketService = Depends(get_ticket_service)
):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    payload = await _read_create_request(request)

    logger.info(
        "Creating ticket",
        extra={"correlation_id": correlation_id, "title_preview": (payload.title or "")[:100]}
    )

    ticket = await service.create_ticket(payload.title)
    return TicketDTO.from_domain(ticket)


@realtime_router.websocket("/ws")
async def ticket_events(websocket: WebSocket):
    """
    Real-time ticket feed.

    Sends ``init`` with the current list on connect, then ``ticket:new`` for
    every ticket created. Messages from the client are ignored.
    """
    broadcaster: WebSocketBroadcaster = websocket.app.state.broadcaster
    service: TicketService = websocket.app.state.ticket_service

    client_id = await broadcaster.connect(websocket, service.list_tickets)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        broadcaster.disconnect(client_id)
