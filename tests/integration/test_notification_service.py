"""Integration tests for delivering and retrying outbox notifications."""

import json
from collections.abc import AsyncGenerator
from uuid import uuid4

import httpx
import pytest

from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.core.notifications import TelegramNotifier
from src.projecthub.models import Notification, NotificationStatus, Role
from src.projecthub.repositories import NotificationRepository
from src.projecthub.services import NotificationService
from src.projecthub.services.notification_service import RETRY_PREFIX
from tests.helpers import create_client_with_project, create_thread

pytestmark = pytest.mark.integration


@pytest.fixture
def bot_replies() -> list[int]:
    """Status codes the fake Bot API answers with, in order; then 200."""
    return []


@pytest.fixture
async def flaky_notifier(
    bot_replies: list[int], telegram_requests: list[httpx.Request]
) -> AsyncGenerator[TelegramNotifier]:
    def handler(request: httpx.Request) -> httpx.Response:
        telegram_requests.append(request)
        status = bot_replies.pop(0) if bot_replies else 200
        if status == 200:
            return httpx.Response(200, json={"ok": True, "result": {}})
        return httpx.Response(status, json={"ok": False, "description": "Bad Gateway"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        yield TelegramNotifier(http, bot_token="test-token", chat_id="42")


@pytest.fixture
def delivery(session, flaky_notifier) -> NotificationService:
    return NotificationService(session, NotificationRepository(session), flaky_notifier)


async def queue_client_alert(session, services) -> Notification:
    _, project = await create_client_with_project(session, name="María")
    thread = await create_thread(session, project)
    await services.threads.send_message(thread.id, Role.CLIENT, "¿Cuándo publicamos?")
    [notification_id] = await services.notifications.pending_ids()
    return await NotificationRepository(session).get_by_id(notification_id)


def sent_text(request: httpx.Request) -> str:
    return json.loads(request.content)["text"]


class TestDeliver:
    async def test_delivers_once(self, session, services, delivery, telegram_requests):
        notification = await queue_client_alert(session, services)

        first = await delivery.deliver(notification.id)
        second = await delivery.deliver(notification.id)

        assert first.status == NotificationStatus.SENT.value
        assert first.sent_at is not None
        assert second.attempts == 1
        assert len(telegram_requests) == 1
        assert "¿Cuándo publicamos?" in sent_text(telegram_requests[0])
        assert await services.notifications.pending_ids() == []

    async def test_failure_is_recorded(self, session, services, delivery, bot_replies):
        notification = await queue_client_alert(session, services)
        bot_replies.append(502)

        result = await delivery.deliver(notification.id)

        assert result.status == NotificationStatus.FAILED.value
        assert result.attempts == 1
        assert result.last_error

    async def test_unknown_row(self, delivery):
        with pytest.raises(NotFoundError):
            await delivery.deliver(uuid4())


class TestRetry:
    async def test_failed_rows_are_resent_with_a_marker(
        self, session, services, delivery, bot_replies, telegram_requests
    ):
        notification = await queue_client_alert(session, services)
        bot_replies.append(502)
        await delivery.deliver(notification.id)

        summary = await delivery.retry_failed()

        assert (summary.attempted, summary.successful, summary.failed) == (1, 1, 0)
        assert notification.status == NotificationStatus.SENT.value
        assert notification.attempts == 2
        assert sent_text(telegram_requests[-1]).startswith(RETRY_PREFIX)

    async def test_nothing_failed(self, delivery):
        summary = await delivery.retry_failed()
        assert summary.attempted == 0


class TestHistory:
    async def test_newest_first_filtered_by_status(self, session, services, delivery):
        notification = await queue_client_alert(session, services)
        await delivery.deliver(notification.id)

        sent, _, has_more = await services.notifications.history(
            None, 10, NotificationStatus.SENT
        )
        pending, _, _ = await services.notifications.history(
            None, 10, NotificationStatus.PENDING
        )

        assert [n.id for n in sent] == [notification.id]
        assert pending == []
        assert not has_more
