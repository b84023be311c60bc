"""Integration test fixtures for database and HTTP client operations.

The schema is created on an in-memory SQLite database shared through a
StaticPool, so every session in a test sees the same data. Adapters that talk
to the outside world (Telegram, Temporal) are replaced with in-process doubles.
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import src.projecthub.models  # noqa: F401 - registers tables on the metadata
from src.projecthub.api.dependencies import get_db_session, get_session_factory
from src.projecthub.core import redis as redis_core
from src.projecthub.core.db import get_session
from src.projecthub.core.live import ChangeFeed
from src.projecthub.core.notifications import TelegramNotifier
from src.projecthub.main import create_app
from tests.helpers import RecordingDispatcher, Services, build_services


@pytest.fixture(autouse=True)
async def _reset_redis_between_tests() -> AsyncGenerator[None]:
    """Reset Redis state between tests to prevent event loop issues.

    Redis clients hold references to their event loop, and pytest creates a
    new loop for each test.
    """
    redis_core.reset_redis_state()
    yield
    await redis_core.close_redis()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database with every table created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine, feed: ChangeFeed) -> AsyncGenerator[AsyncSession]:
    """Session publishing its commits to the test's change feed.

    Services commit themselves; tests seeding data directly must commit too.
    """
    async with get_session(feed=feed, engine=engine) as db_session:
        yield db_session


@pytest.fixture
def services(
    session: AsyncSession,
    telegram_notifier: TelegramNotifier,
    dispatcher: RecordingDispatcher,
) -> Services:
    return build_services(session, telegram_notifier, dispatcher)


@pytest.fixture
def app(
    engine: AsyncEngine,
    feed: ChangeFeed,
    telegram_notifier: TelegramNotifier,
    dispatcher: RecordingDispatcher,
) -> FastAPI:
    """Application wired to the test database and adapter doubles.

    ASGITransport does not run the lifespan, so app.state is filled here.
    """
    application = create_app()
    application.state.change_feed = feed
    application.state.translator = None
    application.state.notifier = telegram_notifier
    application.state.storage = None
    application.state.dispatcher = dispatcher

    async def _db_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(feed=feed, engine=engine) as db_session:
            yield db_session

    def _session_factory():
        return lambda: get_session(engine=engine)

    application.dependency_overrides[get_db_session] = _db_session
    application.dependency_overrides[get_session_factory] = _session_factory
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the test application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
