"""Repository exports."""

from src.projecthub.repositories.base import BaseRepository
from src.projecthub.repositories.client import ClientRepository, ProjectRepository
from src.projecthub.repositories.files import FolderRepository, ProjectFileRepository
from src.projecthub.repositories.legacy import LegacyFeedbackRepository
from src.projecthub.repositories.notification import NotificationRepository
from src.projecthub.repositories.release import ChangelogRepository, FeedbackRepository
from src.projecthub.repositories.thread import MessageRepository, ThreadRepository

__all__ = [
    "BaseRepository",
    "ChangelogRepository",
    "ClientRepository",
    "FeedbackRepository",
    "FolderRepository",
    "LegacyFeedbackRepository",
    "MessageRepository",
    "NotificationRepository",
    "ProjectFileRepository",
    "ProjectRepository",
    "ThreadRepository",
]
