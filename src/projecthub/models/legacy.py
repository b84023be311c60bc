"""Archived copies of feedback that was migrated into threads."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.projecthub.models.base import utc_now


class LegacyFeedback(SQLModel, table=True):
    """Archived copy of a migrated Feedback row, linked to the thread it became."""

    __tablename__ = "legacy_feedback"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    source_id: UUID = Field(index=True, unique=True)
    category: str = Field(max_length=50)
    subject: str = Field(max_length=300)
    description: str
    status: str = Field(max_length=20)
    priority: str = Field(max_length=10)
    developer_notes: str | None = Field(default=None)
    client_response: str | None = Field(default=None)
    created_at: datetime
    migrated_to_thread: UUID | None = Field(default=None, index=True)
    migration_date: datetime = Field(default_factory=utc_now)
