"""Folder and project-file repositories."""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import col, select

from src.projecthub.models import Folder, ProjectFile
from src.projecthub.repositories.base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Repository for project folder operations."""

    model = Folder

    async def list_for_project(
        self, project_id: UUID, parent_folder_id: UUID | None = None, all_levels: bool = False
    ) -> list[Folder]:
        """Folders of a project sorted by name.

        By default only one level is returned: root folders, or the children
        of parent_folder_id.
        """
        query = select(Folder).where(Folder.project_id == project_id)
        if not all_levels:
            if parent_folder_id is None:
                query = query.where(col(Folder.parent_folder_id).is_(None))
            else:
                query = query.where(Folder.parent_folder_id == parent_folder_id)
        result = await self.session.execute(query.order_by(col(Folder.name)))
        return list(result.scalars().all())

    async def count_for_project(self, project_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Folder).where(Folder.project_id == project_id)
        )
        return result.scalar_one()

    async def get_by_bucket(self, project_id: UUID, bucket: str) -> Folder | None:
        result = await self.session.execute(
            select(Folder).where(Folder.project_id == project_id, Folder.bucket == bucket)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, project_id: UUID, name: str) -> Folder | None:
        result = await self.session.execute(
            select(Folder)
            .where(Folder.project_id == project_id, Folder.name == name)
            .order_by(col(Folder.created_at))
        )
        return result.scalars().first()

    async def first_for_project(self, project_id: UUID) -> Folder | None:
        result = await self.session.execute(
            select(Folder)
            .where(Folder.project_id == project_id)
            .order_by(col(Folder.created_at), col(Folder.name))
            .limit(1)
        )
        return result.scalar_one_or_none()


class ProjectFileRepository(BaseRepository[ProjectFile]):
    """Repository for project file catalogue operations."""

    model = ProjectFile

    async def list_for_project(
        self,
        project_id: UUID,
        folder_id: UUID | None = None,
        file_type: str | None = None,
        search: str | None = None,
        root_only: bool = False,
    ) -> list[ProjectFile]:
        """Files of a project, newest first.

        file_type matches a MIME prefix ("image/") or an exact type. search
        matches the file name; tags are matched in Python since they are JSON.
        """
        query = select(ProjectFile).where(ProjectFile.project_id == project_id)
        if folder_id is not None:
            query = query.where(ProjectFile.folder_id == folder_id)
        elif root_only:
            query = query.where(col(ProjectFile.folder_id).is_(None))
        if file_type:
            query = query.where(
                or_(
                    ProjectFile.file_type == file_type,
                    col(ProjectFile.file_type).startswith(file_type.rstrip("*")),
                )
            )
        result = await self.session.execute(query.order_by(col(ProjectFile.uploaded_at).desc()))
        files = list(result.scalars().all())
        if search:
            needle = search.lower()
            files = [
                f
                for f in files
                if needle in f.file_name.lower() or any(needle in t.lower() for t in f.tags)
            ]
        return files

    async def list_unorganized(self, project_id: UUID) -> list[ProjectFile]:
        """Files never placed in a folder, excluding files the user put at the root."""
        result = await self.session.execute(
            select(ProjectFile).where(
                ProjectFile.project_id == project_id,
                col(ProjectFile.folder_id).is_(None),
                col(ProjectFile.manually_placed).is_(False),
            )
        )
        return list(result.scalars().all())

    async def get_by_message(self, message_id: UUID) -> ProjectFile | None:
        result = await self.session.execute(
            select(ProjectFile).where(ProjectFile.message_id == message_id).limit(1)
        )
        return result.scalar_one_or_none()

    async def linked_message_ids(self, project_id: UUID) -> set[UUID]:
        result = await self.session.execute(
            select(ProjectFile.message_id).where(
                ProjectFile.project_id == project_id,
                col(ProjectFile.message_id).is_not(None),
            )
        )
        return {row for row in result.scalars().all() if row is not None}

    async def list_by_messages(self, message_ids: Sequence[UUID]) -> list[ProjectFile]:
        if not message_ids:
            return []
        result = await self.session.execute(
            select(ProjectFile).where(col(ProjectFile.message_id).in_(message_ids))
        )
        return list(result.scalars().all())

    async def list_in_folders(self, folder_ids: Sequence[UUID]) -> list[ProjectFile]:
        if not folder_ids:
            return []
        result = await self.session.execute(
            select(ProjectFile).where(col(ProjectFile.folder_id).in_(folder_ids))
        )
        return list(result.scalars().all())

    async def count_by_folder(self, project_id: UUID) -> dict[UUID | None, int]:
        result = await self.session.execute(
            select(ProjectFile.folder_id, func.count())
            .where(ProjectFile.project_id == project_id)
            .group_by(col(ProjectFile.folder_id))
        )
        return {row[0]: row[1] for row in result.all()}

    async def count_for_project(self, project_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(ProjectFile).where(ProjectFile.project_id == project_id)
        )
        return result.scalar_one()

    async def count_uploaded_since(self, project_id: UUID, since: datetime) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(ProjectFile)
            .where(ProjectFile.project_id == project_id, ProjectFile.uploaded_at >= since)
        )
        return result.scalar_one()
