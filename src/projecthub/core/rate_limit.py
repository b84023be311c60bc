"""Rate limiting for endpoints that end in outbound alerts.

Client messages, alert retries and the Telegram connectivity check all post to
the Bot API, so they are limited per client IP. Limits are kept in Redis when
REDIS_URL is configured and per process otherwise.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.projecthub.core.config import get_settings
from src.projecthub.core.logging import get_logger

logger = get_logger(__name__)

MESSAGE_RATE_LIMIT = "30/minute"
ALERT_RATE_LIMIT = "5/minute"


def get_rate_limit_key(request: Request) -> str:
    """Key on the client IP only; request headers are caller controlled."""
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the limiter with Redis storage when available.

    Disabled in the testing environment.
    """
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    if settings.redis_url:
        logger.info("Rate limiter using Redis backend")
        return Limiter(key_func=get_rate_limit_key, storage_uri=settings.redis_url)

    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


# Settings are read at import time; changing REDIS_URL needs a restart
limiter = create_limiter()
