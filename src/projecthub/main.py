from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.projecthub.api.middlewares import logging_context_middleware
from src.projecthub.api.v1.router import api_router
from src.projecthub.core.config import get_settings
from src.projecthub.core.db import dispose_engine
from src.projecthub.core.exceptions import setup_exception_handlers
from src.projecthub.core.health import setup_health_endpoint, setup_metrics
from src.projecthub.core.live import ChangeFeed, RedisChangeRelay
from src.projecthub.core.logging import get_logger, setup_logging
from src.projecthub.core.notifications import TelegramNotifier
from src.projecthub.core.rate_limit import limiter
from src.projecthub.core.redis import close_redis, get_redis
from src.projecthub.core.storage import ObjectStorage
from src.projecthub.core.translation import Translator
from src.projecthub.temporal.client import close_temporal_client
from src.projecthub.temporal.dispatcher import TemporalNotificationDispatcher

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - build the shared adapters, then tear them down."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}")

    feed = ChangeFeed()
    relay: RedisChangeRelay | None = None
    redis = await get_redis()
    if redis is not None:
        relay = RedisChangeRelay(redis, feed, settings.live_channel)
        await relay.start()

    http = httpx.AsyncClient()
    app.state.change_feed = feed
    app.state.translator = Translator.from_settings(http, settings)
    app.state.notifier = TelegramNotifier.from_settings(http, settings)
    app.state.storage = ObjectStorage.from_settings(settings) if settings.storage_configured else None
    app.state.dispatcher = TemporalNotificationDispatcher(settings.temporal_task_queue)

    if not settings.telegram_configured:
        logger.warning("Telegram is not configured, alerts are only logged")
    if app.state.storage is None:
        logger.warning("Object storage is not configured, file URLs are unavailable")

    yield

    logger.info("Closing connections...")
    if relay is not None:
        await relay.stop()
    feed.close()
    await http.aclose()
    await close_redis()
    await close_temporal_client()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "clients", "description": "Client directory and activity"},
    {"name": "projects", "description": "Projects, their status and deletion"},
    {"name": "threads", "description": "Conversations and unread counters"},
    {"name": "messages", "description": "Message edits, search and statistics"},
    {"name": "folders", "description": "Project folder tree"},
    {"name": "files", "description": "Project file catalogue and object storage"},
    {"name": "notifications", "description": "Alert outbox history and retries"},
    {"name": "feedback", "description": "Client feedback and its release workflow"},
    {"name": "changelog", "description": "Bilingual release notes per version"},
    {"name": "maintenance", "description": "Legacy migration and cleanup"},
    {"name": "live", "description": "Server-Sent Event streams of live queries"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Client-developer project communication API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    app.state.limiter = limiter

    # Map domain exceptions to responses that carry the request_id
    setup_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    app.middleware("http")(logging_context_middleware)

    # Added last so it is the outermost middleware and the id exists for the rest
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(api_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
