"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.projecthub.api.dependencies.db import DBSession
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


def get_client_repository(session: DBSession) -> ClientRepository:
    return ClientRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_thread_repository(session: DBSession) -> ThreadRepository:
    return ThreadRepository(session)


def get_message_repository(session: DBSession) -> MessageRepository:
    return MessageRepository(session)


def get_folder_repository(session: DBSession) -> FolderRepository:
    return FolderRepository(session)


def get_file_repository(session: DBSession) -> ProjectFileRepository:
    return ProjectFileRepository(session)


def get_notification_repository(session: DBSession) -> NotificationRepository:
    return NotificationRepository(session)


def get_feedback_repository(session: DBSession) -> FeedbackRepository:
    return FeedbackRepository(session)


def get_legacy_feedback_repository(session: DBSession) -> LegacyFeedbackRepository:
    return LegacyFeedbackRepository(session)


def get_changelog_repository(session: DBSession) -> ChangelogRepository:
    return ChangelogRepository(session)


ClientRepo = Annotated[ClientRepository, Depends(get_client_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
ThreadRepo = Annotated[ThreadRepository, Depends(get_thread_repository)]
MessageRepo = Annotated[MessageRepository, Depends(get_message_repository)]
FolderRepo = Annotated[FolderRepository, Depends(get_folder_repository)]
FileRepo = Annotated[ProjectFileRepository, Depends(get_file_repository)]
NotificationRepo = Annotated[NotificationRepository, Depends(get_notification_repository)]
FeedbackRepo = Annotated[FeedbackRepository, Depends(get_feedback_repository)]
LegacyFeedbackRepo = Annotated[LegacyFeedbackRepository, Depends(get_legacy_feedback_repository)]
ChangelogRepo = Annotated[ChangelogRepository, Depends(get_changelog_repository)]
