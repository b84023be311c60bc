"""Thread and message factories for test data generation."""

from polyfactory import Use

from src.projecthub.models import (
    Message,
    MessageType,
    Role,
    Thread,
    ThreadPriority,
    ThreadStatus,
)
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class ThreadFactory(BaseFactory):
    """Factory for generating Thread test data.

    Counters start at zero; tests that need unread state go through the service.
    """

    __model__ = Thread

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    title = Use(lambda: f"Thread {generate_uuid().hex[-8:]}")
    status = ThreadStatus.NEW.value
    priority = ThreadPriority.NORMAL.value
    created_by = Role.CLIENT.value
    is_archived = False
    last_activity = Use(utc_now)
    unread_count_client = 0
    unread_count_developer = 0
    created_at = Use(utc_now)


class MessageFactory(BaseFactory):
    """Factory for generating Message test data."""

    __model__ = Message

    id = Use(generate_uuid)
    thread_id = None  # Required FK - must be set explicitly
    author = Role.CLIENT.value
    content = "Hola, ¿cómo va el proyecto?"
    message_type = MessageType.TEXT.value
    is_private = False
    is_edited = False
    edited_at = None
    created_at = Use(utc_now)
    original_content = None
    original_language = None
    translated_content = None
    target_language = None
    translation_enabled = None
    file_id = None
    file_name = None
    file_type = None
    file_size = None
    file_url = None

    @classmethod
    def attachment(cls, **kwargs):
        """Create a file message with an attached object."""
        defaults = {
            "message_type": MessageType.FILE.value,
            "content": "📎 logo.png",
            "file_id": f"uploads/{generate_uuid().hex}/logo.png",
            "file_name": "logo.png",
            "file_type": "image/png",
            "file_size": 2048,
        }
        defaults.update(kwargs)
        return cls.build(**defaults)

