"""Project lifecycle: CRUD, status updates and the delete cascade."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.exceptions import CascadeError, NotFoundError
from src.projecthub.core.logging import get_logger
from src.projecthub.models import (
    Client,
    MessageType,
    Project,
    ProjectStatus,
    Role,
    Thread,
    ThreadPriority,
    ThreadStatus,
)
from src.projecthub.models.base import to_naive_utc, utc_now
from src.projecthub.repositories import (
    ClientRepository,
    FolderRepository,
    MessageRepository,
    NotificationRepository,
    ProjectFileRepository,
    ProjectRepository,
    ThreadRepository,
)
from src.projecthub.schemas.project import ProjectCreate, ProjectUpdate
from src.projecthub.services.composer import ComposedText
from src.projecthub.services.thread_service import ThreadService

logger = get_logger(__name__)

STATUS_THREAD_TITLE = "Actualizaciones del Proyecto"


def project_status_text(status: ProjectStatus, note: str) -> str:
    return f"📊 **Estado del proyecto actualizado: {status.value.upper()}**\n\n{note}"


@dataclass(frozen=True)
class ProjectSummary:
    """A project with thread counts as one viewer sees it."""

    project: Project
    unread_count: int
    thread_count: int
    active_threads: int
    last_activity: datetime | None = None
    client: Client | None = None


@dataclass(frozen=True)
class ProjectDeletion:
    project_id: UUID
    deleted_threads: int
    deleted_messages: int
    deleted_files: int
    deleted_folders: int
    deleted_notifications: int


class ProjectService:
    """Project operations. Status notes go through ThreadService bookkeeping."""

    def __init__(
        self,
        session: AsyncSession,
        project_repo: ProjectRepository,
        client_repo: ClientRepository,
        thread_repo: ThreadRepository,
        message_repo: MessageRepository,
        folder_repo: FolderRepository,
        file_repo: ProjectFileRepository,
        notification_repo: NotificationRepository,
        threads: ThreadService,
    ):
        self.session = session
        self.project_repo = project_repo
        self.client_repo = client_repo
        self.thread_repo = thread_repo
        self.message_repo = message_repo
        self.folder_repo = folder_repo
        self.file_repo = file_repo
        self.notification_repo = notification_repo
        self.threads = threads

    async def require_project(self, project_id: UUID, lock: bool = False) -> Project:
        if lock:
            project = await self.project_repo.get_for_update(project_id)
        else:
            project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def create_project(self, data: ProjectCreate) -> Project:
        """Create a project for an existing client.

        Raises:
            NotFoundError: Unknown client.
        """
        try:
            if await self.client_repo.get_by_id(data.client_id) is None:
                raise NotFoundError("Client", data.client_id)
            now = utc_now()
            project = Project(
                client_id=data.client_id,
                name=data.name,
                type=data.type.value,
                status=ProjectStatus.NOT_STARTED.value,
                priority=data.priority.value,
                icon=data.icon,
                color=data.color,
                description=data.description,
                deadline=to_naive_utc(data.deadline),
                created_at=now,
                updated_at=now,
            )
            self.project_repo.add(project)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Project created", project_id=str(project.id), client_id=str(data.client_id))
        return project

    async def update_project(self, project_id: UUID, data: ProjectUpdate) -> Project:
        """Update provided fields only."""
        try:
            project = await self.require_project(project_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                if isinstance(value, Enum):
                    value = value.value
                elif isinstance(value, datetime):
                    value = to_naive_utc(value)
                setattr(project, field, value)
            project.updated_at = utc_now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return project

    async def toggle_archive(self, project_id: UUID, archived: bool) -> Project:
        try:
            project = await self.require_project(project_id)
            project.is_archived = archived
            project.updated_at = utc_now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Project archive toggled", project_id=str(project_id), archived=archived)
        return project

    async def update_status(
        self, project_id: UUID, status: ProjectStatus, note: str | None = None
    ) -> Project:
        """Change the project status.

        A status change queues a project alert. With a note, the developer also
        posts a status message to the most recently active thread, or to a new
        "Actualizaciones del Proyecto" thread, which the client then sees as
        unread.
        """
        try:
            project = await self.require_project(project_id, lock=True)
            old_status = ProjectStatus(project.status)
            now = utc_now()
            project.status = status.value
            project.updated_at = now

            if note and note.strip():
                latest = await self.thread_repo.latest_for_project(project_id)
                if latest is None:
                    thread = Thread(
                        project_id=project_id,
                        title=STATUS_THREAD_TITLE,
                        status=ThreadStatus.NEW.value,
                        priority=ThreadPriority.NORMAL.value,
                        created_by=Role.DEVELOPER.value,
                        last_activity=now,
                        created_at=now,
                    )
                    self.thread_repo.add(thread)
                    await self.session.flush()
                else:
                    thread = await self.threads.require_thread(latest.id, lock=True)
                await self.threads.post_message(
                    thread,
                    Role.DEVELOPER,
                    ComposedText.plain(project_status_text(status, note.strip())),
                    message_type=MessageType.STATUS_UPDATE,
                )

            if old_status is not status:
                client = await self.client_repo.get_by_id(project.client_id)
                self.threads.outbox.project_status(
                    client.name if client else "Cliente", project, old_status, status, note
                )
            await self.threads.commit()
        except (LookupError, ValueError):
            await self.threads.rollback()
            raise
        except Exception as e:
            await self.threads.rollback()
            logger.error(
                "Failed to update project status", project_id=str(project_id), error=str(e)
            )
            raise

        logger.info(
            "Project status updated",
            project_id=str(project_id),
            old_status=old_status.value,
            status=status.value,
        )
        return project

    async def delete_project(self, project_id: UUID) -> ProjectDeletion:
        """Delete a project and everything under it in one transaction.

        Order: notifications about the project or its threads, catalogue
        entries, messages, threads, folders (children first), the project.

        Raises:
            NotFoundError: Unknown project.
            CascadeError: Any step failed; the transaction was rolled back.
        """
        try:
            project = await self.require_project(project_id, lock=True)
            threads = await self.thread_repo.list_for_project(project_id, include_archived=True)
            thread_ids = [t.id for t in threads]

            notifications = await self.notification_repo.list_referencing(project_id, thread_ids)
            for notification in notifications:
                await self.notification_repo.delete(notification)

            files = await self.file_repo.list_for_project(project_id)
            for project_file in files:
                await self.file_repo.delete(project_file)
            await self.session.flush()

            messages = await self.message_repo.list_for_threads(thread_ids)
            for message in messages:
                await self.message_repo.delete(message)
            await self.session.flush()

            for thread in threads:
                await self.thread_repo.delete(thread)

            folders = await self.folder_repo.list_for_project(project_id, all_levels=True)
            for folder in folders:
                if folder.parent_folder_id is not None:
                    await self.folder_repo.delete(folder)
            await self.session.flush()
            for folder in folders:
                if folder.parent_folder_id is None:
                    await self.folder_repo.delete(folder)
            await self.session.flush()

            await self.project_repo.delete(project)
            await self.session.commit()
        except LookupError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Project delete failed", project_id=str(project_id), error=str(e))
            raise CascadeError(f"Failed to delete project {project_id}: {e}") from e

        result = ProjectDeletion(
            project_id=project_id,
            deleted_threads=len(threads),
            deleted_messages=len(messages),
            deleted_files=len(files),
            deleted_folders=len(folders),
            deleted_notifications=len(notifications),
        )
        logger.info("Project deleted", project_id=str(project_id), threads=len(threads))
        return result

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _summaries(
        self, projects: list[Project], viewer: Role, with_client: bool = False
    ) -> list[ProjectSummary]:
        ids = [p.id for p in projects]
        unread = await self.thread_repo.unread_by_project(viewer, ids)
        counts = await self.thread_repo.count_by_project(ids)
        threads = await self.thread_repo.list_for_projects(ids)
        last_activity: dict[UUID, datetime] = {}
        for thread in threads:
            current = last_activity.get(thread.project_id)
            if current is None or thread.last_activity > current:
                last_activity[thread.project_id] = thread.last_activity

        clients: dict[UUID, Client | None] = {}
        summaries = []
        for project in projects:
            client = None
            if with_client:
                if project.client_id not in clients:
                    clients[project.client_id] = await self.client_repo.get_by_id(
                        project.client_id
                    )
                client = clients[project.client_id]
            total, active = counts.get(project.id, (0, 0))
            summaries.append(
                ProjectSummary(
                    project=project,
                    unread_count=unread.get(project.id, 0),
                    thread_count=total,
                    active_threads=active,
                    last_activity=last_activity.get(project.id, project.updated_at),
                    client=client,
                )
            )
        return summaries

    async def get_project(self, project_id: UUID, viewer: Role) -> ProjectSummary:
        project = await self.require_project(project_id)
        summaries = await self._summaries([project], viewer, with_client=True)
        return summaries[0]

    async def list_client_projects(
        self, client_id: UUID, viewer: Role, include_archived: bool = False
    ) -> list[ProjectSummary]:
        """Projects of a client, most recent thread activity first."""
        if await self.client_repo.get_by_id(client_id) is None:
            raise NotFoundError("Client", client_id)
        projects = await self.project_repo.list_for_client(client_id, include_archived)
        summaries = await self._summaries(projects, viewer)
        return sorted(
            summaries, key=lambda s: s.last_activity or s.project.updated_at, reverse=True
        )

    async def list_by_status(
        self, status: ProjectStatus | None = None, viewer: Role = Role.DEVELOPER
    ) -> list[ProjectSummary]:
        projects = await self.project_repo.list_by_status(status.value if status else None)
        return await self._summaries(projects, viewer, with_client=True)
