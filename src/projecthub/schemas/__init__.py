from src.projecthub.schemas.client import (
    ClientActivityRead,
    ClientCreate,
    ClientRead,
    ClientSummaryRead,
    ClientUpdate,
)
from src.projecthub.schemas.files import (
    FileCreate,
    FileDetailRead,
    FileRead,
    FolderCreate,
    FolderRead,
)
from src.projecthub.schemas.notification import NotificationRead, RetrySummaryRead
from src.projecthub.schemas.pagination import PaginatedResponse
from src.projecthub.schemas.project import (
    ProjectCreate,
    ProjectRead,
    ProjectSummaryRead,
    ProjectUpdate,
)
from src.projecthub.schemas.release import (
    ChangelogCreate,
    ChangelogRead,
    FeedbackCreate,
    FeedbackRead,
)
from src.projecthub.schemas.thread import (
    MessageCreate,
    MessageRead,
    ThreadCreate,
    ThreadRead,
    ThreadSummaryRead,
)

__all__ = [
    # Client
    "ClientActivityRead",
    "ClientCreate",
    "ClientRead",
    "ClientSummaryRead",
    "ClientUpdate",
    # Files
    "FileCreate",
    "FileDetailRead",
    "FileRead",
    "FolderCreate",
    "FolderRead",
    # Notification
    "NotificationRead",
    "RetrySummaryRead",
    # Pagination
    "PaginatedResponse",
    # Project
    "ProjectCreate",
    "ProjectRead",
    "ProjectSummaryRead",
    "ProjectUpdate",
    # Release
    "ChangelogCreate",
    "ChangelogRead",
    "FeedbackCreate",
    "FeedbackRead",
    # Thread
    "MessageCreate",
    "MessageRead",
    "ThreadCreate",
    "ThreadRead",
    "ThreadSummaryRead",
]
