"""
Triage External Service Adapters
==================================

Adapters for the hosted text-generation model used by the triage module.
"""

import time
from typing import Any, Optional

import httpx

from supportops.triage.application import ITextGenerator
from supportops.core import LLMException, ConfigurationException
from supportops.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class HuggingFaceTextGenerator(ITextGenerator):
    """
    Client for a Hugging Face style inference endpoint.

    Request:  POST {"inputs": prompt}
    Response: [{"generated_text": "..."}]
    """

    def __init__(
        self,
        model_url: str,
        api_token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not model_url:
            raise ConfigurationException("Triage model URL not configured")
        self._model_url = model_url
        self._api_token = api_token
        self._http_client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            # Timeouts are enforced per call by the triage service.
            self._http_client = httpx.AsyncClient(timeout=None)
        return self._http_client

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    async def generate(self, prompt: str, operation: str = "generate") -> str:
        """
        Run one generation request.

        A JSON response without a usable ``generated_text`` (an error body,
        a non-2xx status, an empty list) yields ``""`` so the caller applies
        its own default and carries on.

        Raises:
            LLMException: on transport errors, a body that is not JSON or a
                ``generated_text`` that is not a string
        """
        start_time = time.perf_counter()
        client = await self._get_client()

        try:
            response = await client.post(
                self._model_url,
                json={"inputs": prompt},
                headers=self._headers()
            )
        except httpx.HTTPError as e:
            raise LLMException(f"{operation} request failed: {e!r}")

        try:
            payload = response.json()
        except ValueError as e:
            raise LLMException(
                f"{operation} response is not JSON: {e}",
                details={"status_code": response.status_code}
            )

        text = self._extract_text(payload)
        if response.status_code >= 400:
            logger.warning(
                "Text generation returned an error status",
                extra={
                    "operation": operation,
                    "status_code": response.status_code,
                    "payload_type": type(payload).__name__
                }
            )

        logger.debug(
            "Text generation completed",
            extra={
                "operation": operation,
                "latency_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return text

    @staticmethod
    def _extract_text(payload: Any) -> str:
        first = payload[0] if isinstance(payload, list) and payload else None
        text = first.get("generated_text") if isinstance(first, dict) else None
        if not text:
            return ""
        if not isinstance(text, str):
            raise LLMException(
                "generated_text is not a string",
                details={"value_type": type(text).__name__}
            )
        return text

    async def close(self) -> None:
        """Close HTTP client if this adapter created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
        self._http_client = None


class MockTextGenerator(ITextGenerator):
    """
    Mock generator for testing.

    Returns predictable responses without calling external APIs.
    """

    def __init__(self, priority: str = "high", reply: Optional[str] = None):
        self.priority = priority
        self.reply = reply
        self.calls: list[tuple[str, str]] = []

    async def generate(self, prompt: str, operation: str = "generate") -> str:
        self.calls.append((operation, prompt))
        if operation == "priority":
            return self.priority
        if self.reply is not None:
            return self.reply
        return (
            "Thanks for reaching out. We're looking into this issue and "
            "will get back to you shortly."
        )
