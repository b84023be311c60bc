"""Repository for the archive of migrated feedback."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.projecthub.models import LegacyFeedback
from src.projecthub.repositories.base import BaseRepository


class LegacyFeedbackRepository(BaseRepository[LegacyFeedback]):
    model = LegacyFeedback

    async def migrated_source_ids(self) -> set[UUID]:
        result = await self.session.execute(select(LegacyFeedback.source_id))
        return set(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(LegacyFeedback))
        return result.scalar_one()
