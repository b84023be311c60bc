"""Feedback and changelog repositories."""

from sqlalchemy import func
from sqlmodel import col, select

from src.projecthub.models import ChangelogEntry, Feedback, FeedbackStatus
from src.projecthub.repositories.base import BaseRepository


class FeedbackRepository(BaseRepository[Feedback]):
    model = Feedback

    async def list_all(self) -> list[Feedback]:
        """Oldest first, the order migration replays them in."""
        result = await self.session.execute(select(Feedback).order_by(col(Feedback.created_at)))
        return list(result.scalars().all())

    async def list_newest(self, status: FeedbackStatus | None = None) -> list[Feedback]:
        query = select(Feedback)
        if status is not None:
            query = query.where(Feedback.status == status.value)
        result = await self.session.execute(query.order_by(col(Feedback.created_at).desc()))
        return list(result.scalars().all())

    async def lock_by_status(self, status: FeedbackStatus) -> list[Feedback]:
        result = await self.session.execute(
            select(Feedback)
            .where(Feedback.status == status.value)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Feedback))
        return result.scalar_one()


class ChangelogRepository(BaseRepository[ChangelogEntry]):
    model = ChangelogEntry

    async def list_newest(self) -> list[ChangelogEntry]:
        result = await self.session.execute(
            select(ChangelogEntry).order_by(col(ChangelogEntry.release_date).desc())
        )
        return list(result.scalars().all())

    async def get_by_version(self, version: str) -> ChangelogEntry | None:
        result = await self.session.execute(
            select(ChangelogEntry).where(ChangelogEntry.version == version)
        )
        return result.scalar_one_or_none()
