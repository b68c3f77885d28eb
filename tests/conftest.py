import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from supportops.config import Settings
from supportops.main import create_app


def make_settings(**overrides) -> Settings:
    values = {
        "environment": "development",
        "log_level": "WARNING",
        "triage_enabled": True,
        "mock_llm": False,
        "triage_model_url": "https://inference.test/models/flan-t5-small",
        "triage_timeout_seconds": 2.0,
        "seed_sample_ticket": True,
    }
    values.update(overrides)
    return Settings(**values)


def model_transport(
    priority: str = "HIGH",
    reply: str = "Please power-cycle the printer and clear the tray.",
    delay: float = 0.0,
    status_code: int = 200,
    body=None,
    unreachable: bool = False,
) -> httpx.MockTransport:
    """Fake inference endpoint. Records every prompt in ``transport.prompts``."""
    prompts = []

    async def handler(request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["inputs"]
        prompts.append(prompt)
        if delay:
            await asyncio.sleep(delay)
        if unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if body is not None:
            return httpx.Response(status_code, json=body)
        text = priority if prompt.startswith("Classify") else reply
        return httpx.Response(status_code, json=[{"generated_text": text}])

    transport = httpx.MockTransport(handler)
    transport.prompts = prompts
    return transport


@pytest.fixture
def transport():
    return model_transport()


@pytest.fixture
def client(transport):
    with TestClient(create_app(make_settings(), transport)) as test_client:
        yield test_client
