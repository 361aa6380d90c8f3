"""Pytest configuration and shared fixtures for idm-client tests."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from idm_client.config import ClientOptions
from idm_client.transport.retry import RetryPolicy

BASE_URL = "https://api.example.com"


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    This prevents the developer's own IDM_* settings from leaking into tests.
    """
    import os

    test_prefixes = ("TEST_", "IDM_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def no_sleep():
    """Replace asyncio.sleep so retries run instantly; the mock records each delay."""
    with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.fixture
def options():
    """Options with a static token and a fast retry policy."""
    return ClientOptions(
        base_url=BASE_URL,
        token="test-token",
        retry=RetryPolicy(max_retries=3, backoff_factor=0, jitter=0),
    )


@pytest.fixture
async def make_http():
    """Factory for AsyncClients over a given mock transport; closes them after the test."""
    clients: list[httpx.AsyncClient] = []

    def factory(transport: httpx.AsyncBaseTransport) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=transport)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
