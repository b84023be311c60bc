"""Tests for health check dependency reporting and caching."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.projecthub.core.health import reset_health_cache
from src.projecthub.main import create_app

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest.fixture(autouse=True)
def clear_health_cache():
    """Reset health cache before each test."""
    reset_health_cache()
    yield
    reset_health_cache()


@pytest.fixture
def db_session(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace the health check's session factory with a counting double."""
    session = AsyncMock()
    session.scalar.return_value = 2
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    monkeypatch.setattr("src.projecthub.core.health.get_session", factory)
    return factory


@pytest.fixture
def temporal(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    connect = AsyncMock()
    monkeypatch.setattr("src.projecthub.core.health.get_temporal_client", connect)
    return connect


async def get_health(app) -> tuple[int, dict]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
    return response.status_code, response.json()


async def test_all_dependencies_healthy(db_session, temporal, mock_redis):
    status_code, data = await get_health(create_app())

    assert status_code == 200
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"
    assert data["temporal"] == "healthy"
    assert data["redis"] == "healthy"
    assert data["live_queries"] == "shared"
    assert data["outbox_pending"] == 2
    assert data["alerts"] == "log_only"
    assert data["storage"] == "not_configured"
    assert data["cached"] is False


async def test_redis_is_optional(db_session, temporal, mock_redis_unavailable):
    status_code, data = await get_health(create_app())

    assert status_code == 200
    assert data["redis"] == "not_configured"
    assert data["live_queries"] == "process_local"


async def test_temporal_outage_only_degrades(db_session, temporal, mock_redis_unavailable):
    temporal.side_effect = RuntimeError("connection refused")

    status_code, data = await get_health(create_app())

    assert status_code == 503
    assert data["status"] == "degraded"
    assert data["database"] == "healthy"
    assert data["temporal"].startswith("unhealthy: connection refused")


async def test_database_failure_is_unhealthy(db_session, temporal, mock_redis_unavailable):
    db_session.return_value.__aenter__.side_effect = OSError("database is down")

    status_code, data = await get_health(create_app())

    assert status_code == 503
    assert data["status"] == "unhealthy"
    assert data["database"] == "unhealthy: database is down"
    assert data["outbox_pending"] is None


async def test_cached_checks_skip_dependencies(db_session, temporal, mock_redis_unavailable):
    app = create_app()

    _, first = await get_health(app)
    _, second = await get_health(app)

    assert first["cached"] is False
    assert second["cached"] is True
    assert second["cache_age_seconds"] < 10
    assert db_session.call_count == 1
    assert temporal.await_count == 1


async def test_health_check_cache_expiry(db_session, temporal, mock_redis_unavailable):
    """Test that health check cache expires after TTL."""
    app = create_app()

    class MockTime:
        def __init__(self):
            self.current_time = 0.0

        def __call__(self):
            return self.current_time

    mock_time = MockTime()

    with patch("src.projecthub.core.health.time.time", mock_time):
        mock_time.current_time = 0.0
        _, data1 = await get_health(app)
        assert data1["cached"] is False

        mock_time.current_time = 1.0
        _, data2 = await get_health(app)
        assert data2["cached"] is True

        mock_time.current_time = 15.0
        _, data3 = await get_health(app)
        assert data3["cached"] is False
