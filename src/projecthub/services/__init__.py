from src.projecthub.services.changelog_service import ChangelogService
from src.projecthub.services.client_service import ClientService
from src.projecthub.services.composer import ComposedText, MessageComposer
from src.projecthub.services.feedback_service import FeedbackService
from src.projecthub.services.file_service import FileService, classify_file
from src.projecthub.services.message_service import MessageService
from src.projecthub.services.migration_service import MigrationService
from src.projecthub.services.notification_service import (
    NotificationDispatcher,
    NotificationOutbox,
    NotificationService,
)
from src.projecthub.services.project_service import ProjectService
from src.projecthub.services.thread_service import ThreadService

__all__ = [
    "ChangelogService",
    "ClientService",
    "ComposedText",
    "FeedbackService",
    "FileService",
    "MessageComposer",
    "MessageService",
    "MigrationService",
    "NotificationDispatcher",
    "NotificationOutbox",
    "NotificationService",
    "ProjectService",
    "ThreadService",
    "classify_file",
]
