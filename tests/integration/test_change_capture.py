"""Integration tests for publishing committed rows to the change feed."""

import asyncio

import pytest

from src.projecthub.core.db import get_session
from src.projecthub.core.live import Interest, live_query
from src.projecthub.models import Role, Thread
from src.projecthub.repositories import ThreadRepository
from tests.helpers import create_client_with_project, create_thread

pytestmark = pytest.mark.integration


async def next_event(subscription):
    return await asyncio.wait_for(subscription.get(), timeout=1)


class TestCapture:
    async def test_commit_publishes_inserted_and_updated_rows(self, session, services, feed):
        _, project = await create_client_with_project(session)
        thread = await create_thread(session, project)
        messages = feed.subscribe(Interest("messages", "thread_id", str(thread.id)))
        threads = feed.subscribe(Interest("threads", "id", str(thread.id)))

        message = await services.threads.send_message(thread.id, Role.CLIENT, "Hola")

        inserted = await next_event(messages)
        assert (inserted.row_id, inserted.op) == (str(message.id), "insert")
        updated = await next_event(threads)
        assert updated.op == "update"
        assert updated.keys["project_id"] == str(project.id)

    async def test_rollback_publishes_nothing(self, session, feed):
        _, project = await create_client_with_project(session)
        subscription = feed.subscribe(Interest("threads"))

        session.add(Thread(project_id=project.id, title="Borrador", created_by="client"))
        await session.flush()
        await session.rollback()

        assert subscription.drain() == 0

    async def test_one_event_per_row_per_commit(self, session, feed):
        _, project = await create_client_with_project(session)
        subscription = feed.subscribe(Interest("threads"))

        thread = Thread(project_id=project.id, title="Borrador", created_by="client")
        session.add(thread)
        await session.flush()
        thread.title = "Definitivo"
        await session.flush()
        await session.commit()

        event = await next_event(subscription)
        assert event.op == "insert"
        assert subscription.drain() == 0


async def test_live_unread_count_follows_commits(engine, session, services, feed):
    _, project = await create_client_with_project(session)
    thread = await create_thread(session, project)

    async def fetch() -> int:
        async with get_session(engine=engine) as read_session:
            return await ThreadRepository(read_session).total_unread(Role.DEVELOPER)

    results = live_query(feed, [Interest("threads")], fetch)
    try:
        assert await anext(results) == 0

        await services.threads.send_message(thread.id, Role.CLIENT, "¿Hay novedades?")
        assert await asyncio.wait_for(anext(results), timeout=1) == 1

        await services.threads.mark_as_read(thread.id, Role.DEVELOPER)
        assert await asyncio.wait_for(anext(results), timeout=1) == 0
    finally:
        await results.aclose()
