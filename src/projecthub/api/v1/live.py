"""Live query streams over Server-Sent Events.

Each stream sends the current result immediately and again whenever a commit
touches the rows it depends on. Events are named after the stream. Idle
connections are pinged every PING_SECONDS.
"""

import json
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import aclosing
from typing import Any
from uuid import UUID

from fastapi import APIRouter
from sse_starlette.sse import EventSourceResponse

from src.projecthub.api.dependencies import Feed, ReadSessions
from src.projecthub.api.dependencies.db import SessionFactory
from src.projecthub.core.live import ChangeFeed, Interest, live_query
from src.projecthub.core.logging import get_logger
from src.projecthub.models import Role
from src.projecthub.repositories import MessageRepository, ThreadRepository
from src.projecthub.schemas.thread import MessageRead, ThreadSummaryRead, UnreadCountRead
from src.projecthub.services.thread_service import ThreadSummary

logger = get_logger(__name__)

router = APIRouter(prefix="/live", tags=["live"])

PING_SECONDS = 15


def sse_event(name: str, payload: Any) -> dict[str, str]:
    return {"event": name, "data": json.dumps(payload)}


async def stream_live(
    feed: ChangeFeed,
    interests: Sequence[Interest],
    fetch: Callable[[], Awaitable[Any]],
    name: str,
) -> AsyncIterator[dict[str, str]]:
    """Render a live query as SSE events until the client goes away."""
    logger.debug("Live stream opened", stream=name)
    try:
        async with aclosing(live_query(feed, interests, fetch)) as results:
            async for result in results:
                yield sse_event(name, result)
    finally:
        logger.debug("Live stream closed", stream=name)


def _response(stream: AsyncIterator[dict[str, str]]) -> EventSourceResponse:
    return EventSourceResponse(stream, ping=PING_SECONDS)


@router.get("/threads/{thread_id}/messages")
async def stream_thread_messages(
    thread_id: UUID,
    feed: Feed,
    sessions: ReadSessions,
    include_private: bool = False,
) -> EventSourceResponse:
    """The thread's messages, oldest first, re-sent on every change."""

    async def fetch() -> list[dict[str, Any]]:
        async with sessions() as session:
            messages = await MessageRepository(session).list_for_thread(
                thread_id, include_private
            )
        return [MessageRead.model_validate(m).model_dump(mode="json") for m in messages]

    interests = [Interest("messages", "thread_id", str(thread_id))]
    return _response(stream_live(feed, interests, fetch, "thread_messages"))


async def _project_threads(
    sessions: SessionFactory, project_id: UUID, viewer: Role
) -> list[dict[str, Any]]:
    async with sessions() as session:
        threads = await ThreadRepository(session).list_for_project(project_id)
        latest = await MessageRepository(session).last_visible(
            [t.id for t in threads], include_private=viewer is Role.DEVELOPER
        )
    summaries = [
        ThreadSummary(
            thread=thread,
            unread_count=thread.unread_for(viewer),
            last_message=latest.get(thread.id),
        )
        for thread in threads
    ]
    return [ThreadSummaryRead.from_summary(s).model_dump(mode="json") for s in summaries]


@router.get("/projects/{project_id}/threads")
async def stream_project_threads(
    project_id: UUID,
    feed: Feed,
    sessions: ReadSessions,
    viewer: Role = Role.DEVELOPER,
) -> EventSourceResponse:
    """The project's open threads with unread counts for the viewer."""
    # Every send touches the thread row (counters, last_activity)
    interests = [Interest("threads", "project_id", str(project_id))]
    return _response(
        stream_live(
            feed,
            interests,
            lambda: _project_threads(sessions, project_id, viewer),
            "project_threads",
        )
    )


@router.get("/unread-count")
async def stream_unread_count(
    feed: Feed, sessions: ReadSessions, viewer: Role
) -> EventSourceResponse:
    async def fetch() -> dict[str, Any]:
        async with sessions() as session:
            total = await ThreadRepository(session).total_unread(viewer)
        return UnreadCountRead(viewer=viewer, unread_count=total).model_dump(mode="json")

    return _response(stream_live(feed, [Interest("threads")], fetch, "unread_count"))
