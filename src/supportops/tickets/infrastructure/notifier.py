"""
Real-time Broadcaster
=====================

Thin pub/sub over WebSockets: a snapshot on connect, one message per new
ticket to every connected client. No acknowledgements, no replay buffer.

Message format:
    {"event": "init", "data": {"tickets": [...]}}
    {"event": "ticket:new", "data": {...ticket...}}
"""

import uuid
from typing import Any, Awaitable, Callable, Dict, List

from fastapi import WebSocket

from supportops.config import TicketEvent
from supportops.tickets.application import ITicketNotifier, InitEventData, TicketDTO
from supportops.tickets.domain import Ticket
from supportops.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class WebSocketBroadcaster(ITicketNotifier):
    """Tracks connected WebSocket clients and fans out ticket events."""

    def __init__(self):
        self._connections: Dict[str, WebSocket] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(
        self,
        websocket: WebSocket,
        snapshot: Callable[[], Awaitable[List[Ticket]]]
    ) -> str:
        """
        Accept ``websocket``, register it and send the ``init`` snapshot.

        The snapshot is read and the client registered without yielding to
        the event loop, so every ticket is either in the snapshot or
        broadcast to this client afterwards.
        """
        await websocket.accept()
        client_id = uuid.uuid4().hex

        tickets = await snapshot()
        self._connections[client_id] = websocket
        payload = InitEventData(tickets=[TicketDTO.from_domain(t) for t in tickets])
        try:
            await websocket.send_json({
                "event": TicketEvent.INIT,
                "data": payload.model_dump(mode="json", by_alias=True)
            })
        except Exception:
            self._connections.pop(client_id, None)
            raise

        logger.info(
            "client connected",
            extra={"client_id": client_id, "connections": self.connection_count}
        )
        return client_id

    def disconnect(self, client_id: str) -> None:
        if self._connections.pop(client_id, None) is not None:
            logger.info(
                "client disconnected",
                extra={"client_id": client_id, "connections": self.connection_count}
            )

    async def broadcast(self, event: str, data: Any) -> int:
        """
        Send ``event`` to every connected client.

        Clients whose send fails are dropped. Returns the number of clients
        that received the message.
        """
        message = {"event": event, "data": data}
        delivered = 0
        for client_id, websocket in list(self._connections.items()):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(
                    "Dropping client after failed send",
                    extra={"client_id": client_id, "event": event, "error": str(e)}
                )
                self.disconnect(client_id)
        return delivered

    async def ticket_created(self, ticket: Ticket) -> None:
        delivered = await self.broadcast(
            TicketEvent.TICKET_NEW, TicketDTO.from_domain(ticket).to_wire()
        )
        logger.debug(
            "ticket:new broadcast",
            extra={"ticket_id": ticket.id, "delivered": delivered}
        )
