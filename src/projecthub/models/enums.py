"""Shared enums for models."""

from enum import Enum


class Role(str, Enum):
    """Who acts in a conversation. Every thread has one of each."""

    CLIENT = "client"
    DEVELOPER = "developer"

    @property
    def counterpart(self) -> "Role":
        return Role.DEVELOPER if self is Role.CLIENT else Role.CLIENT


class Language(str, Enum):
    EN = "en"
    ES = "es"


class ProjectType(str, Enum):
    PRESENTATION = "presentation"
    CARDS = "cards"
    LEAD_GEN = "lead_gen"
    WEBSITE = "website"
    OTHER = "other"


class ProjectStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETE = "complete"
    PAUSED = "paused"


class ProjectPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ThreadStatus(str, Enum):
    NEW = "new"
    ACKNOWLEDGED = "acknowledged"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ThreadPriority(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"


class MessageType(str, Enum):
    TEXT = "text"
    SYSTEM = "system"
    STATUS_UPDATE = "status_update"
    FILE = "file"


class NotificationType(str, Enum):
    TELEGRAM = "telegram"
    EMAIL = "email"


class NotificationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class FolderBucket(str, Enum):
    """The fixed file taxonomy. Values are the canonical folder names."""

    IMAGES = "Images"
    DOCUMENTS = "Documents"
    PDFS = "PDFs"
    OTHER = "Other"


class FeedbackStatus(str, Enum):
    """Where a feedback item is in the release workflow."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    RELEASED = "released"


class FeedbackCategory(str, Enum):
    SUGGESTION = "suggestion"
    BUG = "bug"
    CHANGE_REQUEST = "change_request"


class FeedbackPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
