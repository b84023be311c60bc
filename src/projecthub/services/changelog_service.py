"""Versioned release notes in English and Spanish."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.core.logging import get_logger
from src.projecthub.models import ChangelogEntry
from src.projecthub.models.base import utc_now
from src.projecthub.repositories import ChangelogRepository
from src.projecthub.schemas.release import ChangelogCreate

logger = get_logger(__name__)


class ChangelogService:
    def __init__(self, session: AsyncSession, changelog_repo: ChangelogRepository):
        self.session = session
        self.changelog_repo = changelog_repo

    async def create_entry(self, data: ChangelogCreate) -> ChangelogEntry:
        """Publish release notes for a version, dated now.

        Raises:
            ValueError: The version already has an entry.
        """
        try:
            if await self.changelog_repo.get_by_version(data.version) is not None:
                raise ValueError(f"Changelog for version {data.version} already exists")
            entry = ChangelogEntry(
                version=data.version,
                release_date=utc_now(),
                english_content=data.english_content.model_dump(),
                spanish_content=data.spanish_content.model_dump(),
                release_notes_en=data.release_notes_en,
                release_notes_es=data.release_notes_es,
            )
            self.changelog_repo.add(entry)
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race with another writer of the same version
            await self.session.rollback()
            raise ValueError(f"Changelog for version {data.version} already exists") from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Changelog entry created", version=entry.version, entry_id=str(entry.id))
        return entry

    async def list_entries(self) -> list[ChangelogEntry]:
        """Newest release first."""
        return await self.changelog_repo.list_newest()

    async def get_by_version(self, version: str) -> ChangelogEntry:
        """Raises NotFoundError when the version has no entry."""
        entry = await self.changelog_repo.get_by_version(version)
        if entry is None:
            raise NotFoundError("Changelog", version)
        return entry
