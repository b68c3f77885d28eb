"""
Process Lifecycle
=================

Two-state lifecycle for the server process:

    RUNNING --(SIGTERM / SIGINT)--> SHUTTING_DOWN (terminal)

Entering SHUTTING_DOWN arms a watchdog that force-exits the process if the
graceful close has not finished within the grace period. Uncaught errors are
logged and never trigger a shutdown.
"""

import asyncio
import os
import sys
import threading
from typing import Any, Callable, Optional

from supportops.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class LifecycleState:
    """Process lifecycle states."""
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


class ProcessLifecycle:
    """
    Tracks the process state and owns the forced-exit watchdog.

    ``exit_func`` is called with status 1 when the watchdog fires.
    """

    def __init__(
        self,
        grace_seconds: float = 10.0,
        exit_func: Callable[[int], Any] = os._exit
    ):
        self.grace_seconds = grace_seconds
        self._exit_func = exit_func
        self._state = LifecycleState.RUNNING
        self._lock = threading.Lock()
        self._watchdog: Optional[threading.Timer] = None

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_shutting_down(self) -> bool:
        return self._state == LifecycleState.SHUTTING_DOWN

    def begin_shutdown(self, reason: str = "signal") -> bool:
        """
        Transition to SHUTTING_DOWN and arm the watchdog.

        Returns False if a shutdown was already in progress.
        """
        with self._lock:
            if self._state == LifecycleState.SHUTTING_DOWN:
                return False
            self._state = LifecycleState.SHUTTING_DOWN

        logger.info(
            "Received shutdown signal, closing server",
            extra={"reason": reason, "grace_seconds": self.grace_seconds}
        )
        self._watchdog = threading.Timer(self.grace_seconds, self._force_exit)
        self._watchdog.daemon = True
        self._watchdog.start()
        return True

    def complete(self) -> None:
        """Graceful close finished; disarm the watchdog."""
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None
        logger.info("HTTP server closed")

    def _force_exit(self) -> None:
        logger.warning("Forcing shutdown", extra={"grace_seconds": self.grace_seconds})
        self._exit_func(1)


def _log_uncaught(exc_type, exc_value, exc_traceback) -> None:
    logger.error(
        "uncaughtException",
        exc_info=(exc_type, exc_value, exc_traceback)
    )


def _log_uncaught_thread(args: threading.ExceptHookArgs) -> None:
    if args.exc_type is SystemExit:
        return
    logger.error(
        "uncaughtException",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        extra={"thread": getattr(args.thread, "name", None)}
    )


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    exc = context.get("exception")
    logger.error(
        "unhandledRejection",
        exc_info=(type(exc), exc, exc.__traceback__) if exc else None,
        extra={"context_message": context.get("message")}
    )


def install_exception_hooks() -> None:
    """
    Log uncaught exceptions from the main thread and worker threads.

    Process-wide; call once from the server entry point.
    """
    sys.excepthook = _log_uncaught
    threading.excepthook = _log_uncaught_thread


def install_loop_exception_handler(loop: asyncio.AbstractEventLoop) -> None:
    """Log exceptions from tasks on ``loop`` that nobody retrieved."""
    loop.set_exception_handler(_log_loop_exception)
