"""Notification outbox repository."""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import col, select

from src.projecthub.models import Notification, NotificationStatus
from src.projecthub.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification delivery records."""

    model = Notification

    async def list_by_status(
        self, status: NotificationStatus, limit: int, created_before: datetime | None = None
    ) -> list[Notification]:
        """Oldest first, so retries drain in arrival order."""
        query = select(Notification).where(Notification.status == status.value)
        if created_before is not None:
            query = query.where(Notification.created_at < created_before)
        result = await self.session.execute(
            query.order_by(col(Notification.created_at)).limit(limit)
        )
        return list(result.scalars().all())

    async def history(
        self, cursor: str | None, limit: int, status: NotificationStatus | None = None
    ) -> tuple[list[Notification], str | None, bool]:
        query = select(Notification)
        if status is not None:
            query = query.where(Notification.status == status.value)
        return await self.paginate(query, cursor, limit, col(Notification.created_at))

    async def list_referencing(
        self, project_id: UUID, thread_ids: Sequence[UUID]
    ) -> list[Notification]:
        """Notifications pointing at the project or any of the given threads."""
        conditions = [Notification.project_id == project_id]
        if thread_ids:
            conditions.append(col(Notification.thread_id).in_(thread_ids))
        result = await self.session.execute(select(Notification).where(or_(*conditions)))
        return list(result.scalars().all())
