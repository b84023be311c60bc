"""Model exports.

Import from here: `from src.projecthub.models import Thread, Message`
"""

from src.projecthub.models.client import Client, Project
from src.projecthub.models.enums import (
    FeedbackCategory,
    FeedbackPriority,
    FeedbackStatus,
    FolderBucket,
    Language,
    MessageType,
    NotificationStatus,
    NotificationType,
    ProjectPriority,
    ProjectStatus,
    ProjectType,
    Role,
    ThreadPriority,
    ThreadStatus,
)
from src.projecthub.models.files import Folder, ProjectFile
from src.projecthub.models.legacy import LegacyFeedback
from src.projecthub.models.notification import Notification
from src.projecthub.models.release import ChangelogEntry, Feedback
from src.projecthub.models.thread import Message, Thread

__all__ = [
    # Enums
    "FeedbackCategory",
    "FeedbackPriority",
    "FeedbackStatus",
    "FolderBucket",
    "Language",
    "MessageType",
    "NotificationStatus",
    "NotificationType",
    "ProjectPriority",
    "ProjectStatus",
    "ProjectType",
    "Role",
    "ThreadPriority",
    "ThreadStatus",
    # Tables
    "ChangelogEntry",
    "Client",
    "Feedback",
    "Folder",
    "LegacyFeedback",
    "Message",
    "Notification",
    "Project",
    "ProjectFile",
    "Thread",
]
