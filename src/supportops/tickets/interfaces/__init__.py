"""
Tickets Interfaces Layer
========================

Interface adapters (controllers) for the tickets module.

Contains:
- Controllers: FastAPI HTTP routes and the WebSocket event feed
"""

from supportops.tickets.interfaces.controllers import router as tickets_router
from supportops.tickets.interfaces.controllers import realtime_router

__all__ = ["tickets_router", "realtime_router"]
