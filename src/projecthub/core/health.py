"""Health check endpoint with dependency validation and caching.

Only the database decides between healthy and unhealthy. Temporal and Redis
outages degrade the service: alerts wait in the outbox and live queries stay
local to each process.
"""

import secrets
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import func, select, text

from src.projecthub.core.config import get_settings
from src.projecthub.core.db import get_session
from src.projecthub.core.redis import get_redis
from src.projecthub.models import Notification, NotificationStatus
from src.projecthub.temporal.client import get_temporal_client

HEALTH_CACHE_TTL = 10  # seconds

_health_cache: dict[str, Any] | None = None
_health_cache_time: float = 0


def reset_health_cache() -> None:
    """Reset health cache (for testing)."""
    global _health_cache, _health_cache_time
    _health_cache = None
    _health_cache_time = 0


def _degrade(report: dict[str, Any]) -> None:
    if report["status"] == "healthy":
        report["status"] = "degraded"


def _response(report: dict[str, Any]) -> JSONResponse:
    status_code = 200 if report["status"] == "healthy" else 503
    return JSONResponse(content=report, status_code=status_code)


async def _check_database(report: dict[str, Any]) -> None:
    """Ping the database and count alerts still waiting for delivery."""
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
            report["outbox_pending"] = await session.scalar(
                select(func.count())
                .select_from(Notification)
                .where(Notification.status == NotificationStatus.PENDING.value)
            )
        report["database"] = "healthy"
    except Exception as e:
        report["database"] = f"unhealthy: {e!s}"
        report["status"] = "unhealthy"


async def _check_temporal(report: dict[str, Any]) -> None:
    try:
        await get_temporal_client()
        report["temporal"] = "healthy"
    except Exception as e:
        report["temporal"] = f"unhealthy: {e!s}"
        _degrade(report)


async def _check_redis(report: dict[str, Any]) -> None:
    redis = await get_redis()
    if not redis:
        return
    try:
        await redis.ping()  # type: ignore[misc]
        report["redis"] = "healthy"
        report["live_queries"] = "shared"
    except Exception as e:
        report["redis"] = f"unhealthy: {e!s}"
        _degrade(report)


async def collect_health(now: float) -> dict[str, Any]:
    """Run every dependency check and build the uncached report."""
    settings = get_settings()
    report: dict[str, Any] = {
        "status": "healthy",
        "database": "unknown",
        "temporal": "unknown",
        "redis": "not_configured",
        "live_queries": "process_local",
        "outbox_pending": None,
        "alerts": "telegram" if settings.telegram_configured else "log_only",
        "storage": "configured" if settings.storage_configured else "not_configured",
        "cached": False,
        "timestamp": now,
    }
    await _check_database(report)
    await _check_temporal(report)
    await _check_redis(report)
    return report


def setup_health_endpoint(app: FastAPI) -> None:
    """Configure the health check endpoint."""

    @app.get("/health")
    async def health() -> JSONResponse:
        """Dependency status, cached for HEALTH_CACHE_TTL seconds."""
        global _health_cache, _health_cache_time

        now = time.time()
        if _health_cache and (now - _health_cache_time) < HEALTH_CACHE_TTL:
            cached = {
                **_health_cache,
                "cached": True,
                "cache_age_seconds": round(now - _health_cache_time, 1),
            }
            return _response(cached)

        _health_cache = await collect_health(now)
        _health_cache_time = now
        return _response(_health_cache)


def setup_metrics(app: FastAPI) -> None:
    """Configure Prometheus metrics with optional API key protection."""
    settings = get_settings()
    instrumentator = Instrumentator().instrument(app)

    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
        expected = settings.metrics_api_key or ""
        if api_key is None or not secrets.compare_digest(api_key, expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
