"""Tests for the notification workflows and worker wiring."""

import uuid
from unittest.mock import AsyncMock

import pytest
from temporalio import activity
from temporalio.client import ScheduleAlreadyRunningError
from temporalio.testing import WorkflowEnvironment
from temporalio.worker import Worker

from src.projecthub.core.config import Settings
from src.projecthub.temporal.activities import RetryFailedOutput
from src.projecthub.temporal.worker import RETRY_SCHEDULE_ID, ensure_retry_schedule
from src.projecthub.temporal.workflows import (
    NotificationDeliveryWorkflow,
    NotificationRetryWorkflow,
)

pytestmark = pytest.mark.unit


class FakeOutbox:
    """Activity doubles registered under the real activity names."""

    def __init__(self, pending: list[str], sendable: set[str]):
        self.pending = pending
        self.sendable = sendable
        self.delivered: list[str] = []

    @activity.defn(name="list_pending_notifications")
    async def list_pending(self, limit: int) -> list[str]:
        return self.pending[:limit]

    @activity.defn(name="deliver_notification")
    async def deliver(self, notification_id: str) -> bool:
        self.delivered.append(notification_id)
        return notification_id in self.sendable

    @activity.defn(name="retry_failed_notifications")
    async def retry_failed(self, limit: int) -> RetryFailedOutput:
        return RetryFailedOutput(attempted=2, successful=1, failed=1)


class TestNotificationWorkflows:
    @pytest.mark.asyncio
    async def test_delivery_workflow_reports_sent(self) -> None:
        outbox = FakeOutbox(pending=[], sendable={"n-1"})
        async with await WorkflowEnvironment.start_time_skipping() as env:  # noqa: SIM117
            async with Worker(
                env.client,
                task_queue="test-notifications",
                workflows=[NotificationDeliveryWorkflow],
                activities=[outbox.deliver],
            ):
                sent = await env.client.execute_workflow(
                    NotificationDeliveryWorkflow.run,
                    "n-1",
                    id=f"delivery-{uuid.uuid4()}",
                    task_queue="test-notifications",
                )

        assert sent is True
        assert outbox.delivered == ["n-1"]

    @pytest.mark.asyncio
    async def test_retry_sweep_delivers_pending_then_retries_failed(self) -> None:
        outbox = FakeOutbox(pending=["n-1", "n-2"], sendable={"n-1"})
        async with await WorkflowEnvironment.start_time_skipping() as env:  # noqa: SIM117
            async with Worker(
                env.client,
                task_queue="test-notifications",
                workflows=[NotificationRetryWorkflow],
                activities=[outbox.list_pending, outbox.deliver, outbox.retry_failed],
            ):
                result = await env.client.execute_workflow(
                    NotificationRetryWorkflow.run,
                    10,
                    id=f"sweep-{uuid.uuid4()}",
                    task_queue="test-notifications",
                )

        assert result == {
            "pending_delivered": 1,
            "attempted": 2,
            "successful": 1,
            "failed": 1,
        }
        assert outbox.delivered == ["n-1", "n-2"]


class TestRetrySchedule:
    def settings(self, cron: str | None) -> Settings:
        return Settings(
            database_url="sqlite+aiosqlite://",
            notification_retry_schedule=cron,
            temporal_task_queue="hub-queue",
        )

    async def test_not_configured(self):
        client = AsyncMock()
        assert await ensure_retry_schedule(client, self.settings(None)) is False
        client.create_schedule.assert_not_awaited()

    async def test_creates_schedule(self):
        client = AsyncMock()

        assert await ensure_retry_schedule(client, self.settings("*/15 * * * *")) is True

        schedule_id, schedule = client.create_schedule.await_args.args
        assert schedule_id == RETRY_SCHEDULE_ID
        assert schedule.spec.cron_expressions == ["*/15 * * * *"]
        assert schedule.action.task_queue == "hub-queue"

    async def test_existing_schedule_is_kept(self):
        client = AsyncMock()
        client.create_schedule.side_effect = ScheduleAlreadyRunningError()

        assert await ensure_retry_schedule(client, self.settings("*/15 * * * *")) is False
