"""Conversation models: threads and their messages."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.projecthub.models.base import utc_now
from src.projecthub.models.enums import MessageType, Role, ThreadPriority, ThreadStatus


class Thread(SQLModel, table=True):
    """A conversation scoped to one project.

    unread_count_client / unread_count_developer are maintained by the thread
    service in the same transaction as the message that changes them.
    """

    __tablename__ = "threads"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    title: str = Field(max_length=300)
    status: str = Field(default=ThreadStatus.NEW.value, max_length=20)
    priority: str = Field(default=ThreadPriority.NORMAL.value, max_length=10)
    created_by: str = Field(max_length=10)
    is_archived: bool = Field(default=False, index=True)
    last_activity: datetime = Field(default_factory=utc_now, index=True)
    unread_count_client: int = Field(default=0, ge=0)
    unread_count_developer: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)

    def unread_for(self, role: Role) -> int:
        if role is Role.CLIENT:
            return self.unread_count_client
        return self.unread_count_developer


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    thread_id: UUID = Field(foreign_key="threads.id", index=True)
    author: str = Field(max_length=10)
    content: str
    message_type: str = Field(default=MessageType.TEXT.value, max_length=20)
    is_private: bool = Field(default=False)
    is_edited: bool = Field(default=False)
    edited_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)

    # Translation
    original_content: str | None = Field(default=None)
    original_language: str | None = Field(default=None, max_length=5)
    translated_content: str | None = Field(default=None)
    target_language: str | None = Field(default=None, max_length=5)
    translation_enabled: bool | None = Field(default=None)

    # Attachment; file_id is the storage content id
    file_id: str | None = Field(default=None, max_length=300)
    file_name: str | None = Field(default=None, max_length=255)
    file_type: str | None = Field(default=None, max_length=127)
    file_size: int | None = Field(default=None)
    file_url: str | None = Field(default=None)
