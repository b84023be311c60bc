"""Notification delivery activities."""

from dataclasses import dataclass
from uuid import UUID

import httpx
from temporalio import activity

from src.projecthub.core.config import get_settings
from src.projecthub.core.db import get_session
from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.core.notifications import TelegramNotifier
from src.projecthub.models import NotificationStatus
from src.projecthub.repositories import NotificationRepository
from src.projecthub.services.notification_service import NotificationService


@dataclass
class RetryFailedOutput:
    attempted: int
    successful: int
    failed: int


@activity.defn
async def deliver_notification(notification_id: str) -> bool:
    """
    Deliver one outbox row through Telegram.

    Idempotent: rows already marked sent are skipped, so an activity retry
    after a lost completion never posts the alert twice. A rejected alert is
    recorded as failed and is not retried here; RetryFailedNotifications
    picks it up later.

    Args:
        notification_id: Outbox row id as a string

    Returns:
        True if the row is now sent
    """
    settings = get_settings()
    async with httpx.AsyncClient() as http, get_session() as session:
        service = NotificationService(
            session,
            NotificationRepository(session),
            TelegramNotifier.from_settings(http, settings),
        )
        try:
            notification = await service.deliver(UUID(notification_id))
        except NotFoundError:
            # Deleted together with its project before delivery
            activity.logger.info(f"Notification {notification_id} no longer exists")
            return False

    return notification.status == NotificationStatus.SENT.value


@activity.defn
async def retry_failed_notifications(limit: int) -> RetryFailedOutput:
    """
    Redeliver failed outbox rows with the resend marker.

    Args:
        limit: Maximum rows to retry, oldest first

    Returns:
        RetryFailedOutput with attempted/successful/failed counts
    """
    settings = get_settings()
    async with httpx.AsyncClient() as http, get_session() as session:
        service = NotificationService(
            session,
            NotificationRepository(session),
            TelegramNotifier.from_settings(http, settings),
        )
        summary = await service.retry_failed(limit=limit)

    activity.logger.info(
        f"Retried {summary.attempted} notifications: {summary.successful} sent"
    )
    return RetryFailedOutput(
        attempted=summary.attempted,
        successful=summary.successful,
        failed=summary.failed,
    )


@activity.defn
async def list_pending_notifications(limit: int) -> list[str]:
    """Ids of rows still pending, e.g. because scheduling failed after commit."""
    async with get_session() as session:
        repo = NotificationRepository(session)
        rows = await repo.list_by_status(NotificationStatus.PENDING, limit)
    return [str(row.id) for row in rows]
