"""Database session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.projecthub.core.db.engine import get_engine
from src.projecthub.core.live.capture import attach_change_feed
from src.projecthub.core.live.feed import ChangeFeed


@asynccontextmanager
async def get_session(
    feed: ChangeFeed | None = None,
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession]:
    """Create a database session.

    Args:
        feed: If provided, rows written by this session are published to the
              feed after each successful commit (live queries).
        engine: Optional engine override for testing.

    Yields:
        AsyncSession with expire_on_commit and autoflush disabled.
    """
    if engine is None:
        engine = get_engine()

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        if feed is not None:
            attach_change_feed(session, feed)
        yield session
