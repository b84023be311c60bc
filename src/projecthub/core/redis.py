"""Optional Redis connection used to relay live-query changes between processes.

If REDIS_URL is not set or the server is unreachable, get_redis() returns None
and live queries fall back to the process-local change feed.
"""

from redis.asyncio import ConnectionPool, Redis

from src.projecthub.core.config import get_settings
from src.projecthub.core.logging import get_logger

logger = get_logger(__name__)

_pool: ConnectionPool | None = None
_redis: Redis | None = None
_connection_attempted: bool = False


async def get_redis() -> Redis | None:
    """Get the shared Redis client, or None when unavailable.

    The first call connects and pings; a failed attempt is not retried until
    close_redis() or reset_redis_state() is called.
    """
    global _pool, _redis, _connection_attempted

    if _redis is not None:
        return _redis
    if _connection_attempted:
        return None

    _connection_attempted = True
    settings = get_settings()

    if not settings.redis_url:
        logger.info("Redis not configured, live queries are process-local")
        return None

    try:
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        _redis = Redis(connection_pool=_pool)
        await _redis.ping()  # type: ignore[misc]
        logger.info("Redis connected", url=settings.redis_url.split("@")[-1])
        return _redis
    except Exception as e:
        logger.warning("Redis connection failed, live queries are process-local", error=str(e))
        if _redis is not None:
            await _redis.aclose()
            _redis = None
        if _pool is not None:
            await _pool.disconnect()
            _pool = None
        return None


async def close_redis() -> None:
    """Close the Redis connection pool. Call during shutdown."""
    global _pool, _redis, _connection_attempted

    if _redis is not None:
        await _redis.aclose()
        logger.info("Redis connection closed")
    if _pool is not None:
        await _pool.disconnect()

    _redis = None
    _pool = None
    _connection_attempted = False


def reset_redis_state() -> None:
    """Forget the cached client so tests can reconnect."""
    global _pool, _redis, _connection_attempted
    _redis = None
    _pool = None
    _connection_attempted = False
