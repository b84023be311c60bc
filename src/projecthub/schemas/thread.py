"""Thread and message schemas for API request/response."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.projecthub.models import MessageType, Role, ThreadPriority, ThreadStatus
from src.projecthub.schemas.client import ClientRead
from src.projecthub.schemas.project import ProjectRead

if TYPE_CHECKING:
    from src.projecthub.services.message_service import MessageHit
    from src.projecthub.services.thread_service import ThreadSummary


def _not_blank(value: str, what: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{what} cannot be empty or whitespace only")
    return value


class ThreadCreate(BaseModel):
    project_id: UUID
    title: str = Field(min_length=1, max_length=300)
    created_by: Role
    priority: ThreadPriority = ThreadPriority.NORMAL
    initial_message: str | None = Field(default=None, max_length=10000)
    translate: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _not_blank(v, "Thread title")


class ThreadRead(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    status: ThreadStatus
    priority: ThreadPriority
    created_by: Role
    is_archived: bool
    last_activity: datetime
    unread_count_client: int
    unread_count_developer: int
    created_at: datetime

    model_config = {"from_attributes": True}


class MessageRead(BaseModel):
    id: UUID
    thread_id: UUID
    author: Role
    content: str
    message_type: MessageType
    is_private: bool
    is_edited: bool
    edited_at: datetime | None
    created_at: datetime

    original_content: str | None = None
    original_language: str | None = None
    translated_content: str | None = None
    target_language: str | None = None
    translation_enabled: bool | None = None

    file_id: str | None = None
    file_name: str | None = None
    file_type: str | None = None
    file_size: int | None = None
    file_url: str | None = None

    model_config = {"from_attributes": True}


class ThreadSummaryRead(ThreadRead):
    """A thread as one viewer sees it: their unread count and the last message."""

    unread_count: int = 0
    last_message: MessageRead | None = None
    project: ProjectRead | None = None
    client: ClientRead | None = None

    @classmethod
    def from_summary(cls, summary: "ThreadSummary") -> "ThreadSummaryRead":
        last = summary.last_message
        return cls(
            **ThreadRead.model_validate(summary.thread).model_dump(),
            unread_count=summary.unread_count,
            last_message=MessageRead.model_validate(last) if last else None,
            project=ProjectRead.model_validate(summary.project) if summary.project else None,
            client=ClientRead.model_validate(summary.client) if summary.client else None,
        )


class ThreadStatusUpdate(BaseModel):
    status: ThreadStatus
    updated_by: Role
    note: str | None = Field(default=None, max_length=5000)


class MarkRead(BaseModel):
    reader: Role


class UnreadCountRead(BaseModel):
    viewer: Role
    unread_count: int


class MessageCreate(BaseModel):
    author: Role
    content: str = Field(min_length=1, max_length=10000)
    is_private: bool = False
    translate: bool = False

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _not_blank(v, "Message content")


class MessageEdit(BaseModel):
    editor: Role
    content: str = Field(min_length=1, max_length=10000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _not_blank(v, "Message content")


class DeveloperNoteCreate(BaseModel):
    note: str = Field(min_length=1, max_length=10000)

    @field_validator("note")
    @classmethod
    def validate_note(cls, v: str) -> str:
        return _not_blank(v, "Note")


class FileMessageCreate(BaseModel):
    """Attachment message. file_id is the content id returned by the upload target."""

    author: Role
    file_id: str = Field(min_length=1, max_length=300)
    file_name: str = Field(min_length=1, max_length=255)
    file_type: str = Field(default="application/octet-stream", max_length=127)
    file_size: int = Field(default=0, ge=0)
    caption: str | None = Field(default=None, max_length=2000)
    file_url: str | None = None


class MessageHitRead(BaseModel):
    message: MessageRead
    thread: ThreadRead | None = None
    project: ProjectRead | None = None

    @classmethod
    def from_hit(cls, hit: "MessageHit") -> "MessageHitRead":
        return cls(
            message=MessageRead.model_validate(hit.message),
            thread=ThreadRead.model_validate(hit.thread) if hit.thread else None,
            project=ProjectRead.model_validate(hit.project) if hit.project else None,
        )


class MessageStatsRead(BaseModel):
    total_messages: int
    client_messages: int
    developer_messages: int
    private_notes: int
    avg_response_time_hours: float
    most_active_day: str | None
