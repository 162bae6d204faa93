"""
pytest configuration and shared fixtures for the Craft Gateway tests.

Key concern: tests must not call the real OpenAI API. We achieve this by:
  1. Setting AI_MOCK_MODE=true before the app is imported, so the
     CompletionClient singleton returns canned replies.
  2. Overriding get_completion_client with a FakeCompletionClient in
     tests that need to control the upstream reply (fake_upstream), or
     passing one straight to combine() (make_fake_client).
  3. Resetting the in-memory limiter before every test so request counts
     don't bleed between tests.

httpx's ASGITransport doesn't run the lifespan, so the client fixture
enters it explicitly — that's what loads the instructions and creates
the discovery counter.
"""

import os
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("AI_MOCK_MODE", "true")
os.environ.setdefault("ENVIRONMENT", "test")

STEAM_REPLY = '```json\n{"name":"Steam","emoji":"💨🔥"}\n```'


class FakeCompletionClient:
    """Stands in for CompletionClient; `complete` is an AsyncMock."""

    configured = True

    def __init__(self, reply: str = STEAM_REPLY) -> None:
        self.complete = AsyncMock(return_value=reply)


@pytest.fixture(autouse=True)
def reset_limiter():
    from craft_gateway.core.rate_limit import limiter

    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture()
def make_fake_client():
    """Factory for FakeCompletionClient; pass a reply to override Steam."""
    return FakeCompletionClient


@pytest.fixture()
def fake_upstream():
    """Route craft requests to a FakeCompletionClient."""
    from craft_gateway.ai.completion_client import get_completion_client
    from craft_gateway.main import app

    fake = FakeCompletionClient()
    app.dependency_overrides[get_completion_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_completion_client, None)


@pytest.fixture()
async def client():
    """
    HTTPX async test client wired to the FastAPI app, lifespan included.

    Usage:
        async def test_something(client):
            response = await client.get("/")
            assert response.status_code == 200
    """
    from craft_gateway.main import app

    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
