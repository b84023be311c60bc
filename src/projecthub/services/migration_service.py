"""One-time reshaping of legacy feedback into clients, projects and threads.

Both operations are safe to run on every boot: the feedback migration is
guarded by the client's unique name and the cleanup only matches text that
has not been cleaned yet.
"""

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.logging import get_logger
from src.projecthub.models import (
    Client,
    Feedback,
    FeedbackPriority,
    FeedbackStatus,
    Language,
    LegacyFeedback,
    Message,
    MessageType,
    Project,
    ProjectPriority,
    ProjectStatus,
    ProjectType,
    Role,
    Thread,
    ThreadPriority,
    ThreadStatus,
)
from src.projecthub.models.base import utc_now
from src.projecthub.repositories import (
    ClientRepository,
    FeedbackRepository,
    LegacyFeedbackRepository,
    MessageRepository,
    ProjectFileRepository,
    ProjectRepository,
    ThreadRepository,
)

logger = get_logger(__name__)

PRIMARY_PROJECT_NAME = "Agua Limpia - Presentación"
PRIMARY_PROJECT_DESCRIPTION = (
    "Presentación profesional para sistema de tratamiento de agua con PWA offline "
    "y funcionalidad completa."
)
WELCOME_TITLE_PREFIX = "¡Bienvenido a "
WELCOME_TITLE_SUFFIX = "!"
WELCOME_MESSAGE_FRAGMENTS = (
    "¡Hola! Este es tu espacio de comunicación",
    "¡Bienvenido al proyecto",
)

_FEEDBACK_STATUS_MAP = {
    FeedbackStatus.NEW.value: ThreadStatus.NEW,
    FeedbackStatus.IN_PROGRESS.value: ThreadStatus.IN_PROGRESS,
    FeedbackStatus.COMPLETED.value: ThreadStatus.RESOLVED,
}


def thread_status_for(feedback_status: str) -> ThreadStatus:
    return _FEEDBACK_STATUS_MAP.get(feedback_status, ThreadStatus.CLOSED)


def thread_priority_for(feedback_priority: str) -> ThreadPriority:
    if feedback_priority == FeedbackPriority.HIGH.value:
        return ThreadPriority.URGENT
    return ThreadPriority.NORMAL


def welcome_title_target(title: str) -> str | None:
    """The cleaned title for "¡Bienvenido a X!", or None when it does not match."""
    if title.startswith(WELCOME_TITLE_PREFIX) and title.endswith(WELCOME_TITLE_SUFFIX):
        cleaned = title[len(WELCOME_TITLE_PREFIX) : -len(WELCOME_TITLE_SUFFIX)].strip()
        return cleaned or None
    return None


@dataclass(frozen=True)
class MigrationResult:
    migrated: bool
    client_id: UUID
    message: str
    main_project_id: UUID | None = None
    migrated_feedback_count: int = 0


@dataclass(frozen=True)
class CleanupResult:
    updated_threads: int
    deleted_messages: int


@dataclass(frozen=True)
class MigrationStatus:
    clients_count: int
    projects_count: int
    threads_count: int
    messages_count: int
    legacy_feedback_count: int
    original_feedback_count: int
    remaining_feedback_count: int

    @property
    def migration_completed(self) -> bool:
        return self.clients_count > 0


class MigrationService:
    """Legacy data reshaping and greeting cleanup."""

    def __init__(
        self,
        session: AsyncSession,
        client_repo: ClientRepository,
        project_repo: ProjectRepository,
        thread_repo: ThreadRepository,
        message_repo: MessageRepository,
        file_repo: ProjectFileRepository,
        feedback_repo: FeedbackRepository,
        legacy_repo: LegacyFeedbackRepository,
    ):
        self.session = session
        self.client_repo = client_repo
        self.project_repo = project_repo
        self.thread_repo = thread_repo
        self.message_repo = message_repo
        self.file_repo = file_repo
        self.feedback_repo = feedback_repo
        self.legacy_repo = legacy_repo

    async def _migrate_feedback(self, feedback: Feedback, project_id: UUID) -> Thread:
        """Thread, seed messages and archive row for one feedback record."""
        status = thread_status_for(feedback.status)
        thread = Thread(
            project_id=project_id,
            title=feedback.subject,
            status=status.value,
            priority=thread_priority_for(feedback.priority).value,
            created_by=Role.CLIENT.value,
            last_activity=utc_now(),
            unread_count_client=0,
            unread_count_developer=1 if status is ThreadStatus.NEW else 0,
            created_at=feedback.created_at,
        )
        self.thread_repo.add(thread)
        await self.session.flush()

        self.message_repo.add(
            Message(
                thread_id=thread.id,
                author=Role.CLIENT.value,
                content=f"**{feedback.category}**\n\n{feedback.description}",
                message_type=MessageType.TEXT.value,
                created_at=feedback.created_at,
            )
        )
        if feedback.developer_notes:
            self.message_repo.add(
                Message(
                    thread_id=thread.id,
                    author=Role.DEVELOPER.value,
                    content=f"📝 **Nota del desarrollador:**\n\n{feedback.developer_notes}",
                    message_type=MessageType.TEXT.value,
                    # Keep the note after the description it answers
                    created_at=feedback.created_at + timedelta(seconds=1),
                )
            )

        self.legacy_repo.add(
            LegacyFeedback(
                source_id=feedback.id,
                category=feedback.category,
                subject=feedback.subject,
                description=feedback.description,
                status=feedback.status,
                priority=feedback.priority,
                developer_notes=feedback.developer_notes,
                client_response=feedback.client_response,
                created_at=feedback.created_at,
                migrated_to_thread=thread.id,
            )
        )
        return thread

    async def migrate_feedback_data(
        self, client_name: str, client_email: str | None = None
    ) -> MigrationResult:
        """Create the client, its primary project and one thread per feedback row.

        No-op when a client with client_name already exists; the existing id
        is returned. Under a concurrent first run the unique client name lets
        exactly one caller create data.
        """
        existing = await self.client_repo.get_by_name(client_name)
        if existing is not None:
            return MigrationResult(
                migrated=False, client_id=existing.id, message="Migration already completed"
            )

        try:
            now = utc_now()
            client = Client(
                name=client_name,
                email=client_email,
                language=Language.ES.value,
                created_at=now,
                last_active=now,
            )
            self.client_repo.add(client)
            await self.session.flush()
            project = Project(
                client_id=client.id,
                name=PRIMARY_PROJECT_NAME,
                type=ProjectType.PRESENTATION.value,
                status=ProjectStatus.IN_PROGRESS.value,
                priority=ProjectPriority.HIGH.value,
                icon="💧",
                color="#0EA5E9",
                description=PRIMARY_PROJECT_DESCRIPTION,
                created_at=now,
                updated_at=now,
            )
            self.project_repo.add(project)
            await self.session.flush()

            already_archived = await self.legacy_repo.migrated_source_ids()
            migrated = 0
            for feedback in await self.feedback_repo.list_all():
                if feedback.id in already_archived:
                    continue
                await self._migrate_feedback(feedback, project.id)
                migrated += 1
            await self.session.flush()

            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            winner = await self.client_repo.get_by_name(client_name)
            if winner is None:
                raise
            logger.info("Feedback migration ran concurrently", client_id=str(winner.id))
            return MigrationResult(
                migrated=False, client_id=winner.id, message="Migration already completed"
            )
        except Exception as e:
            await self.session.rollback()
            logger.error("Feedback migration failed", error=str(e))
            raise

        logger.info(
            "Feedback migrated",
            client_id=str(client.id),
            project_id=str(project.id),
            feedback=migrated,
        )
        return MigrationResult(
            migrated=True,
            client_id=client.id,
            message="Migration completed successfully",
            main_project_id=project.id,
            migrated_feedback_count=migrated,
        )

    async def cleanup_welcome_messages(self) -> CleanupResult:
        """Rename greeting thread titles and delete greeting messages."""
        try:
            updated = 0
            for thread in await self.thread_repo.list_titles_like(f"{WELCOME_TITLE_PREFIX}%"):
                cleaned = welcome_title_target(thread.title)
                if cleaned is not None:
                    thread.title = cleaned
                    updated += 1

            messages = await self.message_repo.containing_any(WELCOME_MESSAGE_FRAGMENTS)
            for project_file in await self.file_repo.list_by_messages([m.id for m in messages]):
                project_file.message_id = None
            await self.session.flush()
            for message in messages:
                await self.message_repo.delete(message)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if updated or messages:
            logger.info("Welcome messages cleaned", threads=updated, messages=len(messages))
        return CleanupResult(updated_threads=updated, deleted_messages=len(messages))

    async def status(self) -> MigrationStatus:
        original = await self.feedback_repo.list_all()
        archived = await self.legacy_repo.migrated_source_ids()
        return MigrationStatus(
            clients_count=await self.client_repo.count(),
            projects_count=await self.project_repo.count(),
            threads_count=await self.thread_repo.count(),
            messages_count=await self.message_repo.count(),
            legacy_feedback_count=await self.legacy_repo.count(),
            original_feedback_count=len(original),
            remaining_feedback_count=sum(1 for f in original if f.id not in archived),
        )
