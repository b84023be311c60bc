"""FastAPI dependency injection definitions.

Re-exports the Annotated dependencies routers use.
"""

# Adapters
from src.projecthub.api.dependencies.adapters import (
    Feed,
    Notifier,
    Storage,
    get_change_feed,
    get_dispatcher,
    get_notifier,
    get_optional_storage,
    get_translator,
)

# Database
from src.projecthub.api.dependencies.db import (
    DBSession,
    ReadSessions,
    get_db_session,
    get_session_factory,
)

# Services
from src.projecthub.api.dependencies.services import (
    ChangelogServiceDep,
    ClientServiceDep,
    FeedbackServiceDep,
    FileServiceDep,
    MessageServiceDep,
    MigrationServiceDep,
    NotificationServiceDep,
    ProjectServiceDep,
    ThreadServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "ReadSessions",
    "get_db_session",
    "get_session_factory",
    # Adapters
    "Feed",
    "Notifier",
    "Storage",
    "get_change_feed",
    "get_dispatcher",
    "get_notifier",
    "get_optional_storage",
    "get_translator",
    # Services
    "ChangelogServiceDep",
    "ClientServiceDep",
    "FeedbackServiceDep",
    "FileServiceDep",
    "MessageServiceDep",
    "MigrationServiceDep",
    "NotificationServiceDep",
    "ProjectServiceDep",
    "ThreadServiceDep",
]
