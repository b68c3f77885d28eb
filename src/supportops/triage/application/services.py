"""
Triage Application Services
============================

The enrichment adapter: turns issue text into a priority and a suggested
reply via an unreliable text-generation backend, and never raises.
"""

import time
from abc import ABC, abstractmethod

from supportops.triage.domain import TriageResult, TriagePromptBuilder, normalize_priority
from supportops.shared.infrastructure.bounded import bounded
from supportops.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Interfaces ==========

class ITextGenerator(ABC):
    """Interface for a text-generation backend."""

    @abstractmethod
    async def generate(self, prompt: str, operation: str = "generate") -> str:
        """
        Return the generated text for ``prompt``.

        Raises LLMException (or a transport error) on failure.
        """

    async def close(self) -> None:
        """Release any held resources."""


class ITriageService(ABC):
    """Interface for ticket triage. Implementations must not raise."""

    @abstractmethod
    async def triage(self, text: str) -> TriageResult:
        """Return priority and suggested reply for ``text``."""


# ========== Application Services ==========

class TriageService(ITriageService):
    """
    Two sequential generation calls, each bounded by ``timeout_seconds``.

    Any failure of either call yields TriageResult.fallback().
    """

    def __init__(self, generator: ITextGenerator, timeout_seconds: float = 25.0):
        self._generator = generator
        self.timeout_seconds = timeout_seconds

    async def triage(self, text: str) -> TriageResult:
        start_time = time.perf_counter()

        priority_outcome = await bounded(
            self._generator.generate(
                TriagePromptBuilder.priority_prompt(text), operation="priority"
            ),
            self.timeout_seconds
        )
        if not priority_outcome.ok:
            return self._fallback("priority", priority_outcome.describe_error(), start_time)

        reply_outcome = await bounded(
            self._generator.generate(
                TriagePromptBuilder.reply_prompt(text), operation="reply"
            ),
            self.timeout_seconds
        )
        if not reply_outcome.ok:
            return self._fallback("reply", reply_outcome.describe_error(), start_time)

        result = TriageResult(
            priority=normalize_priority(priority_outcome.value),
            suggested_reply=reply_outcome.value or ""
        )
        logger.info(
            "Triage completed",
            extra={
                "priority": result.priority,
                "raw_priority": (priority_outcome.value or "")[:50],
                "reply_length": len(result.suggested_reply),
                "latency_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return result

    def _fallback(self, operation: str, error: str, start_time: float) -> TriageResult:
        logger.warning(
            "AI triage failed, falling back to defaults",
            extra={
                "operation": operation,
                "error": error,
                "timeout_seconds": self.timeout_seconds,
                "latency_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return TriageResult.fallback()


class FallbackTriageService(ITriageService):
    """Triage disabled: every ticket gets the defaults without any call."""

    async def triage(self, text: str) -> TriageResult:
        return TriageResult.fallback()
