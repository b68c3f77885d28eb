"""
SupportOps - Main Application
=============================

Support-ticket intake service.

Modules:
- Tickets: create and list tickets, push new tickets to WebSocket clients
- Triage: best-effort AI priority and suggested reply for new tickets

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: In-memory store, WebSocket broadcaster, text-generation client
"""

import asyncio
import signal
import socket
from contextlib import asynccontextmanager
from types import FrameType
from typing import AsyncGenerator, List, Optional, Tuple

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Configuration and Core
from supportops.config import Settings, get_settings
from supportops.core import ValidationException

# Ticket module
from supportops.tickets.application import TicketService, HealthResponse
from supportops.tickets.domain import TicketIdSequence
from supportops.tickets.infrastructure import (
    InMemoryTicketRepository,
    WebSocketBroadcaster,
    sample_ticket,
)
from supportops.tickets.interfaces import tickets_router, realtime_router

# Triage module
from supportops.triage.application import (
    ITextGenerator, ITriageService, TriageService, FallbackTriageService
)
from supportops.triage.infrastructure import HuggingFaceTextGenerator, MockTextGenerator

# Shared
from supportops.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    validation_exception_handler,
    global_exception_handler,
)
from supportops.shared.infrastructure.lifecycle import (
    ProcessLifecycle,
    install_exception_hooks,
    install_loop_exception_handler,
)
from supportops.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


def triage_mode(app_settings: Settings) -> str:
    if not app_settings.triage_enabled:
        return "disabled"
    return "mock" if app_settings.mock_llm else "enabled"


def build_triage_service(
    app_settings: Settings,
    http_client: httpx.AsyncClient
) -> Tuple[ITriageService, Optional[ITextGenerator]]:
    """Pick the triage implementation the settings ask for."""
    mode = triage_mode(app_settings)
    if mode == "disabled":
        return FallbackTriageService(), None

    if mode == "mock":
        generator: ITextGenerator = MockTextGenerator()
    else:
        generator = HuggingFaceTextGenerator(
            model_url=app_settings.triage_model_url,
            api_token=app_settings.huggingface_api_token,
            http_client=http_client
        )
    return TriageService(generator, app_settings.triage_timeout_seconds), generator


def create_app(
    app_settings: Optional[Settings] = None,
    triage_transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    ``triage_transport`` replaces the network transport of the
    text-generation client (used by tests).
    """
    app_settings = app_settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """
        Application lifespan manager.

        STARTUP:
        1. Setup structured logging and the loop exception handler
        2. Create the ticket store (optionally seeded)
        3. Create the triage adapter and its HTTP client
        4. Create the broadcaster and ticket service

        SHUTDOWN:
        1. Close the text-generation client
        """
        # === STARTUP ===
        setup_logging(app_settings.log_level, app_settings.environment)
        install_loop_exception_handler(asyncio.get_running_loop())
        logger.info("Starting SupportOps", extra={
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "triage": triage_mode(app_settings)
        })

        initial = [sample_ticket()] if app_settings.seed_sample_ticket else []
        repository = InMemoryTicketRepository(initial)
        id_sequence = TicketIdSequence(start_after=max((t.id for t in initial), default=0))

        http_client = httpx.AsyncClient(timeout=None, transport=triage_transport)
        triage, generator = build_triage_service(app_settings, http_client)

        broadcaster = WebSocketBroadcaster()

        app.state.settings = app_settings
        app.state.repository = repository
        app.state.broadcaster = broadcaster
        app.state.ticket_service = TicketService(
            repository=repository,
            triage=triage,
            notifier=broadcaster,
            id_sequence=id_sequence
        )

        logger.info("SupportOps started successfully")

        yield  # Application runs here

        # === SHUTDOWN ===
        logger.info("Shutting down SupportOps")
        if generator is not None:
            await generator.close()
        await http_client.aclose()
        logger.info("SupportOps shutdown complete")

    app = FastAPI(
        title="SupportOps Ticket API",
        description="""
    ## Support Ticket Intake

    Submit a ticket title, get it back enriched with an AI priority and
    suggested reply, and watch new tickets arrive live.

    **Endpoints:**
    - `GET /api/tickets` - List tickets, newest first
    - `POST /api/tickets` - Create a ticket
    - `WS /ws` - `init` snapshot on connect, `ticket:new` per created ticket
    - `GET /health` - Liveness check

    AI triage is best-effort: on timeout or failure tickets get
    `priority: "medium"` and an empty `suggestedReply`.
    """,
        version=app_settings.app_version,
        debug=app_settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # === CORS Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials="*" not in app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # === Include Module Routers ===
    app.include_router(tickets_router)
    app.include_router(realtime_router)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"], response_model=HealthResponse, responses={
        200: {
            "description": "Service is alive",
            "content": {
                "application/json": {
                    "example": {
                        "status": "ok",
                        "version": "1.0.0",
                        "environment": "development",
                        "checks": {
                            "tickets": 1,
                            "realtime_clients": 0,
                            "triage": "enabled",
                            "lifecycle": "running"
                        }
                    }
                }
            }
        }
    })
    async def health_check(request: Request):
        """
        Health check endpoint for hosts and load balancers.

        Always 200 while the process serves requests.
        """
        state = request.app.state
        checks = {
            "tickets": await state.repository.count(),
            "realtime_clients": state.broadcaster.connection_count,
            "triage": triage_mode(app_settings),
        }
        lifecycle = getattr(state, "lifecycle", None)
        if lifecycle is not None:
            checks["lifecycle"] = lifecycle.state

        return HealthResponse(
            status="ok",
            version=app_settings.app_version,
            environment=app_settings.environment,
            checks=checks
        )

    @app.get("/api", tags=["Root"])
    async def root():
        """API information."""
        return {
            "service": app_settings.app_name,
            "version": app_settings.app_version,
            "docs": "/docs",
            "health": "/health",
            "endpoints": [
                "GET /api/tickets - List tickets",
                "POST /api/tickets - Create ticket",
                "WS /ws - Real-time ticket events"
            ]
        }

    # === Static web client ===
    if app_settings.static_dir is not None and app_settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=app_settings.static_dir, html=True), name="static")

    return app


app = create_app()


# === Server Entry Point ===

class SupportOpsServer(uvicorn.Server):
    """
    uvicorn server that reports signals to the process lifecycle.

    A handled SIGTERM/SIGINT ends in a clean close and exit status 0;
    uvicorn does not re-raise it after serving.
    """

    def __init__(self, config: uvicorn.Config, lifecycle: ProcessLifecycle):
        super().__init__(config)
        self.lifecycle = lifecycle

    def handle_exit(self, sig: int, frame: Optional[FrameType]) -> None:
        self.lifecycle.begin_shutdown(reason=signal.Signals(sig).name)
        super().handle_exit(sig, frame)
        self._captured_signals.clear()

    async def shutdown(self, sockets: Optional[List[socket.socket]] = None) -> None:
        await super().shutdown(sockets=sockets)
        self.lifecycle.complete()


def run() -> None:
    """Serve the application until SIGTERM/SIGINT."""
    app_settings = get_settings()
    setup_logging(app_settings.log_level, app_settings.environment)
    install_exception_hooks()

    lifecycle = ProcessLifecycle(grace_seconds=app_settings.shutdown_grace_seconds)
    app.state.lifecycle = lifecycle

    config = uvicorn.Config(
        app,
        host=app_settings.host,
        port=app_settings.port,
        log_config=None,
        log_level=app_settings.log_level.lower(),
        timeout_graceful_shutdown=int(app_settings.shutdown_grace_seconds),
    )
    server = SupportOpsServer(config, lifecycle)

    logger.info(
        f"SupportOps running at http://localhost:{app_settings.port}",
        extra={"host": app_settings.host, "port": app_settings.port}
    )
    server.run()


if __name__ == "__main__":
    run()
