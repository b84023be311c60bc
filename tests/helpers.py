"""Test helper functions for common data creation patterns."""

from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.notifications import TelegramNotifier
from src.projecthub.core.storage import ObjectStorage
from src.projecthub.models import Client, Project, Thread
from src.projecthub.repositories import (
    ChangelogRepository,
    ClientRepository,
    FeedbackRepository,
    FolderRepository,
    LegacyFeedbackRepository,
    MessageRepository,
    NotificationRepository,
    ProjectFileRepository,
    ProjectRepository,
    ThreadRepository,
)
from src.projecthub.services import (
    ChangelogService,
    ClientService,
    FeedbackService,
    FileService,
    MessageComposer,
    MessageService,
    MigrationService,
    NotificationOutbox,
    NotificationService,
    ProjectService,
    ThreadService,
)
from tests.factories import ClientFactory, ProjectFactory, ThreadFactory


class RecordingDispatcher:
    """Dispatcher double that remembers what it was asked to schedule."""

    def __init__(self) -> None:
        self.scheduled: list[UUID] = []

    async def schedule(self, notification_ids: Sequence[UUID]) -> None:
        self.scheduled.extend(notification_ids)


@dataclass
class Services:
    threads: ThreadService
    messages: MessageService
    files: FileService
    projects: ProjectService
    clients: ClientService
    notifications: NotificationService
    migration: MigrationService
    feedback: FeedbackService
    changelog: ChangelogService
    outbox: NotificationOutbox


def build_services(
    session: AsyncSession,
    notifier: TelegramNotifier,
    dispatcher: RecordingDispatcher | None = None,
    composer: MessageComposer | None = None,
    storage: ObjectStorage | None = None,
) -> Services:
    """Wire services the same way the request dependencies do.

    Every service shares the session and one outbox, as within one request.
    """
    clients = ClientRepository(session)
    projects = ProjectRepository(session)
    threads = ThreadRepository(session)
    messages = MessageRepository(session)
    folders = FolderRepository(session)
    files = ProjectFileRepository(session)
    notifications = NotificationRepository(session)

    outbox = NotificationOutbox(notifications, notifier.recipient, dispatcher)
    thread_service = ThreadService(
        session, threads, messages, projects, clients, files, outbox, composer
    )
    file_service = FileService(session, projects, folders, files, threads, messages, storage)
    return Services(
        threads=thread_service,
        messages=MessageService(session, thread_service, file_service, messages, threads, projects),
        files=file_service,
        projects=ProjectService(
            session,
            projects,
            clients,
            threads,
            messages,
            folders,
            files,
            notifications,
            thread_service,
        ),
        clients=ClientService(session, clients, projects, threads, messages),
        notifications=NotificationService(session, notifications, notifier),
        migration=MigrationService(
            session,
            clients,
            projects,
            threads,
            messages,
            files,
            FeedbackRepository(session),
            LegacyFeedbackRepository(session),
        ),
        feedback=FeedbackService(session, FeedbackRepository(session)),
        changelog=ChangelogService(session, ChangelogRepository(session)),
        outbox=outbox,
    )


async def create_client_with_project(
    session: AsyncSession, **client_kwargs
) -> tuple[Client, Project]:
    """Create a client with one project and commit.

    Args:
        session: Database session
        **client_kwargs: Additional args passed to ClientFactory

    Returns:
        Tuple of (client, project)
    """
    client = ClientFactory.build(**client_kwargs)
    session.add(client)
    await session.flush()

    project = ProjectFactory.build(client_id=client.id)
    session.add(project)
    await session.commit()
    return client, project


async def create_thread(session: AsyncSession, project: Project, **kwargs) -> Thread:
    """Create an empty thread directly, bypassing counter bookkeeping."""
    thread = ThreadFactory.build(project_id=project.id, **kwargs)
    session.add(thread)
    await session.commit()
    return thread
