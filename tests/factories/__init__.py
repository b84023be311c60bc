"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import ClientFactory, ThreadFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.client import ClientFactory, ProjectFactory
from tests.factories.release import ChangelogEntryFactory, FeedbackFactory
from tests.factories.thread import MessageFactory, ThreadFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Clients
    "ClientFactory",
    "ProjectFactory",
    # Release
    "ChangelogEntryFactory",
    "FeedbackFactory",
    # Threads
    "MessageFactory",
    "ThreadFactory",
]
