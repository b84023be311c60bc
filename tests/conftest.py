"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
# In-memory SQLite keeps the suite free of external services
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
# Live queries stay process-local unless a test opts into Redis
os.environ.setdefault("REDIS_URL", "")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import httpx
import pytest
from fakeredis import aioredis as fakeredis_aio
from redis.asyncio import Redis

from src.projecthub.core import redis as redis_core
from src.projecthub.core.config import get_settings
from src.projecthub.core.live import ChangeFeed
from src.projecthub.core.notifications import TelegramNotifier
from tests.helpers import RecordingDispatcher

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


# --- Adapter Fixtures ---


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def telegram_requests() -> list[httpx.Request]:
    """Requests seen by the telegram_notifier fixture."""
    return []


@pytest.fixture
async def telegram_notifier(
    telegram_requests: list[httpx.Request],
) -> AsyncGenerator[TelegramNotifier]:
    """A configured notifier whose Bot API always accepts."""

    def handler(request: httpx.Request) -> httpx.Response:
        telegram_requests.append(request)
        return httpx.Response(200, json={"ok": True, "result": {}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        yield TelegramNotifier(http, bot_token="test-token", chat_id="42")


# --- Redis Test Fixtures (shared) ---


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """Provides a fakeredis client for testing.

    Returns an in-memory Redis implementation that behaves like
    a real Redis server but doesn't require external dependencies.
    """
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def mock_redis(fake_redis: Redis, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Redis]:
    """Patches get_redis() to return the fakeredis client."""
    redis_core.reset_redis_state()

    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr("src.projecthub.core.redis.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.projecthub.core.health.get_redis", _get_fake_redis)
    yield fake_redis
    redis_core.reset_redis_state()


@pytest.fixture
async def mock_redis_unavailable(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[None]:
    """Patches get_redis() to return None (simulates Redis unavailable)."""
    redis_core.reset_redis_state()

    async def _get_none() -> None:
        return None

    monkeypatch.setattr("src.projecthub.core.redis.get_redis", _get_none)
    monkeypatch.setattr("src.projecthub.core.health.get_redis", _get_none)
    yield
    redis_core.reset_redis_state()
