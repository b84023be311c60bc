"""Database session dependencies."""

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.db import get_session

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """Request-scoped session; commits are published to the app's change feed."""
    async with get_session(feed=getattr(request.app.state, "change_feed", None)) as session:
        yield session


def get_session_factory() -> SessionFactory:
    """Opens short read sessions for streams that outlive one query."""
    return get_session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
ReadSessions = Annotated[SessionFactory, Depends(get_session_factory)]
