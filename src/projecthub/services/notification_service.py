"""Notification outbox and delivery.

Alerts are written as pending rows in the same transaction as the event they
report. Delivery happens afterwards (Temporal workflow or a retry sweep), so a
chat outage never rolls back a message.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.core.logging import get_logger
from src.projecthub.core.notifications import DeliveryResult, TelegramNotifier
from src.projecthub.models import (
    Notification,
    NotificationStatus,
    NotificationType,
    Project,
    ProjectStatus,
    Thread,
)
from src.projecthub.models.base import utc_now
from src.projecthub.repositories import NotificationRepository

logger = get_logger(__name__)

ALERT_PREVIEW_LENGTH = 100
RETRY_PREFIX = "🔄 REENVÍO\n\n"
ALERT_TIMEZONE = ZoneInfo("America/Mexico_City")

PROJECT_STATUS_LABELS: dict[ProjectStatus, tuple[str, str]] = {
    ProjectStatus.NOT_STARTED: ("⏸️", "No iniciado"),
    ProjectStatus.IN_PROGRESS: ("🔄", "En progreso"),
    ProjectStatus.REVIEW: ("👀", "En revisión"),
    ProjectStatus.COMPLETE: ("✅", "Completado"),
    ProjectStatus.PAUSED: ("⏸️", "Pausado"),
}


def truncate(text: str, limit: int = ALERT_PREVIEW_LENGTH) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def format_alert_time(moment: datetime) -> str:
    """Render a naive UTC timestamp in the alert timezone."""
    local = moment.replace(tzinfo=UTC).astimezone(ALERT_TIMEZONE)
    return local.strftime("%d %b %Y, %H:%M")


class NotificationDispatcher(Protocol):
    """Schedules delivery of committed notification rows."""

    async def schedule(self, notification_ids: Sequence[UUID]) -> None: ...


class NotificationOutbox:
    """Writes pending alerts into the caller's transaction.

    Rows queued during a transaction are handed to the dispatcher only after
    the caller commits; a rollback discards them.
    """

    def __init__(
        self,
        notification_repo: NotificationRepository,
        recipient: str,
        dispatcher: NotificationDispatcher | None = None,
    ):
        self.notification_repo = notification_repo
        self.recipient = recipient
        self.dispatcher = dispatcher
        self._queued: list[Notification] = []

    def _enqueue(
        self, message: str, project_id: UUID | None, thread_id: UUID | None = None
    ) -> Notification:
        notification = Notification(
            type=NotificationType.TELEGRAM.value,
            recipient=self.recipient,
            message=message,
            project_id=project_id,
            thread_id=thread_id,
            status=NotificationStatus.PENDING.value,
        )
        self.notification_repo.add(notification)
        self._queued.append(notification)
        return notification

    def discard(self) -> None:
        self._queued.clear()

    async def dispatch(self) -> None:
        """Schedule delivery of everything queued since the last commit."""
        queued, self._queued = self._queued, []
        if queued and self.dispatcher is not None:
            await self.dispatcher.schedule([n.id for n in queued])

    def client_message(
        self, client_name: str, project: Project, thread: Thread, content: str
    ) -> Notification:
        """Alert the developer that the client wrote in a thread."""
        text = (
            "🔔 *Nuevo mensaje de cliente*\n\n"
            f"👤 *Cliente:* {client_name}\n"
            f"📁 *Proyecto:* {project.name}\n"
            f"💬 *Hilo:* {thread.title}\n\n"
            f"📝 *Mensaje:*\n{truncate(content)}\n\n"
            f"⏰ *Fecha:* {format_alert_time(utc_now())}"
        )
        return self._enqueue(text, project.id, thread.id)

    def project_status(
        self,
        client_name: str,
        project: Project,
        old_status: ProjectStatus,
        new_status: ProjectStatus,
        note: str | None = None,
    ) -> Notification:
        old_icon, old_label = PROJECT_STATUS_LABELS[old_status]
        new_icon, new_label = PROJECT_STATUS_LABELS[new_status]
        text = (
            "📊 *Actualización de Proyecto*\n\n"
            f"👤 *Cliente:* {client_name}\n"
            f"📁 *Proyecto:* {project.name}\n\n"
            f"{old_icon} *Estado anterior:* {old_label}\n"
            f"{new_icon} *Estado nuevo:* {new_label}\n\n"
        )
        if note:
            text += f"📝 *Nota:*\n{note}\n\n"
        text += f"⏰ *Fecha:* {format_alert_time(utc_now())}"
        return self._enqueue(text, project.id)


@dataclass(frozen=True)
class RetrySummary:
    attempted: int
    successful: int
    failed: int


class NotificationService:
    """Delivers outbox rows and exposes their history."""

    def __init__(
        self,
        session: AsyncSession,
        notification_repo: NotificationRepository,
        notifier: TelegramNotifier,
    ):
        self.session = session
        self.notification_repo = notification_repo
        self.notifier = notifier

    def _record(self, notification: Notification, result: DeliveryResult) -> None:
        notification.attempts += 1
        if result.ok:
            notification.status = NotificationStatus.SENT.value
            notification.sent_at = utc_now()
            notification.last_error = None
        else:
            notification.status = NotificationStatus.FAILED.value
            notification.last_error = result.error

    async def deliver(self, notification_id: UUID) -> Notification:
        """Send one pending notification and record the outcome.

        Already sent rows are returned untouched, so workflow retries never
        post an alert twice.

        Raises:
            NotFoundError: The row no longer exists.
        """
        notification = await self.notification_repo.get_for_update(notification_id)
        if notification is None:
            await self.session.rollback()
            raise NotFoundError("Notification", notification_id)
        if notification.status == NotificationStatus.SENT.value:
            # Nothing changed; commit only releases the row lock
            await self.session.commit()
            return notification

        result = await self.notifier.send(notification.message)
        try:
            self._record(notification, result)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if result.ok:
            logger.info("Notification sent", notification_id=str(notification_id))
        else:
            logger.warning(
                "Notification delivery failed",
                notification_id=str(notification_id),
                error=result.error,
            )
        return notification

    async def retry_failed(
        self, limit: int = 50, notification_id: UUID | None = None
    ) -> RetrySummary:
        """Redeliver failed notifications with a resend marker.

        Args:
            limit: Maximum rows to retry, oldest first.
            notification_id: Retry just this row (whatever its status).
        """
        if notification_id is not None:
            notification = await self.notification_repo.get_by_id(notification_id)
            if notification is None:
                raise NotFoundError("Notification", notification_id)
            notifications = [notification]
        else:
            notifications = await self.notification_repo.list_by_status(
                NotificationStatus.FAILED, limit
            )

        successful = 0
        try:
            for notification in notifications:
                result = await self.notifier.send(RETRY_PREFIX + notification.message)
                self._record(notification, result)
                if result.ok:
                    successful += 1
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        summary = RetrySummary(
            attempted=len(notifications),
            successful=successful,
            failed=len(notifications) - successful,
        )
        logger.info(
            "Failed notifications retried",
            attempted=summary.attempted,
            successful=summary.successful,
        )
        return summary

    async def pending_ids(self, limit: int = 50) -> list[UUID]:
        rows = await self.notification_repo.list_by_status(NotificationStatus.PENDING, limit)
        return [row.id for row in rows]

    async def history(
        self, cursor: str | None, limit: int, status: NotificationStatus | None = None
    ) -> tuple[list[Notification], str | None, bool]:
        """Newest first with cursor-based pagination."""
        return await self.notification_repo.history(cursor, limit, status)

    async def test_connection(self) -> DeliveryResult:
        return await self.notifier.check_connection()
