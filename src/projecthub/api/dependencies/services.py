"""Service factory dependencies.

FastAPI caches each dependency per request, so every service in one request
shares the session and the notification outbox.
"""

from typing import Annotated

from fastapi import Depends

from src.projecthub.api.dependencies.adapters import (
    Dispatcher,
    Notifier,
    OptionalStorage,
    OptionalTranslator,
)
from src.projecthub.api.dependencies.db import DBSession
from src.projecthub.api.dependencies.repositories import (
    ChangelogRepo,
    ClientRepo,
    FeedbackRepo,
    FileRepo,
    FolderRepo,
    LegacyFeedbackRepo,
    MessageRepo,
    NotificationRepo,
    ProjectRepo,
    ThreadRepo,
)
from src.projecthub.core.config import get_settings
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


def get_outbox(
    notification_repo: NotificationRepo,
    notifier: Notifier,
    dispatcher: Dispatcher,
) -> NotificationOutbox:
    return NotificationOutbox(notification_repo, notifier.recipient, dispatcher)


OutboxDep = Annotated[NotificationOutbox, Depends(get_outbox)]


def get_composer(translator: OptionalTranslator) -> MessageComposer | None:
    if translator is None:
        return None
    return MessageComposer(translator, get_settings().developer_language)


ComposerDep = Annotated[MessageComposer | None, Depends(get_composer)]


def get_thread_service(
    session: DBSession,
    thread_repo: ThreadRepo,
    message_repo: MessageRepo,
    project_repo: ProjectRepo,
    client_repo: ClientRepo,
    file_repo: FileRepo,
    outbox: OutboxDep,
    composer: ComposerDep,
) -> ThreadService:
    return ThreadService(
        session,
        thread_repo,
        message_repo,
        project_repo,
        client_repo,
        file_repo,
        outbox,
        composer,
    )


ThreadServiceDep = Annotated[ThreadService, Depends(get_thread_service)]


def get_file_service(
    session: DBSession,
    project_repo: ProjectRepo,
    folder_repo: FolderRepo,
    file_repo: FileRepo,
    thread_repo: ThreadRepo,
    message_repo: MessageRepo,
    storage: OptionalStorage,
) -> FileService:
    return FileService(
        session,
        project_repo,
        folder_repo,
        file_repo,
        thread_repo,
        message_repo,
        storage,
    )


FileServiceDep = Annotated[FileService, Depends(get_file_service)]


def get_message_service(
    session: DBSession,
    threads: ThreadServiceDep,
    files: FileServiceDep,
    message_repo: MessageRepo,
    thread_repo: ThreadRepo,
    project_repo: ProjectRepo,
) -> MessageService:
    return MessageService(session, threads, files, message_repo, thread_repo, project_repo)


MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]


def get_project_service(
    session: DBSession,
    project_repo: ProjectRepo,
    client_repo: ClientRepo,
    thread_repo: ThreadRepo,
    message_repo: MessageRepo,
    folder_repo: FolderRepo,
    file_repo: FileRepo,
    notification_repo: NotificationRepo,
    threads: ThreadServiceDep,
) -> ProjectService:
    return ProjectService(
        session,
        project_repo,
        client_repo,
        thread_repo,
        message_repo,
        folder_repo,
        file_repo,
        notification_repo,
        threads,
    )


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]


def get_client_service(
    session: DBSession,
    client_repo: ClientRepo,
    project_repo: ProjectRepo,
    thread_repo: ThreadRepo,
    message_repo: MessageRepo,
) -> ClientService:
    return ClientService(session, client_repo, project_repo, thread_repo, message_repo)


ClientServiceDep = Annotated[ClientService, Depends(get_client_service)]


def get_notification_service(
    session: DBSession,
    notification_repo: NotificationRepo,
    notifier: Notifier,
) -> NotificationService:
    return NotificationService(session, notification_repo, notifier)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def get_migration_service(
    session: DBSession,
    client_repo: ClientRepo,
    project_repo: ProjectRepo,
    thread_repo: ThreadRepo,
    message_repo: MessageRepo,
    file_repo: FileRepo,
    feedback_repo: FeedbackRepo,
    legacy_repo: LegacyFeedbackRepo,
) -> MigrationService:
    return MigrationService(
        session,
        client_repo,
        project_repo,
        thread_repo,
        message_repo,
        file_repo,
        feedback_repo,
        legacy_repo,
    )


MigrationServiceDep = Annotated[MigrationService, Depends(get_migration_service)]


def get_feedback_service(session: DBSession, feedback_repo: FeedbackRepo) -> FeedbackService:
    return FeedbackService(session, feedback_repo)


FeedbackServiceDep = Annotated[FeedbackService, Depends(get_feedback_service)]


def get_changelog_service(session: DBSession, changelog_repo: ChangelogRepo) -> ChangelogService:
    return ChangelogService(session, changelog_repo)


ChangelogServiceDep = Annotated[ChangelogService, Depends(get_changelog_service)]
