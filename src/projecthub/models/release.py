"""Client feedback and the changelog it is released in."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.projecthub.models.base import utc_now
from src.projecthub.models.enums import FeedbackPriority, FeedbackStatus


class Feedback(SQLModel, table=True):
    """A suggestion, bug report or change request.

    Moves new -> in_progress -> completed, and to released when a version ships.
    """

    __tablename__ = "feedback"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    category: str = Field(max_length=50)
    subject: str = Field(max_length=300)
    description: str
    status: str = Field(default=FeedbackStatus.NEW.value, max_length=20, index=True)
    priority: str = Field(default=FeedbackPriority.MEDIUM.value, max_length=10)
    developer_notes: str | None = Field(default=None)
    client_response: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class ChangelogEntry(SQLModel, table=True):
    """Release notes for one version, in English and Spanish.

    Each language holds optional lists under features, bugfixes and
    improvements.
    """

    __tablename__ = "changelog"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    version: str = Field(max_length=50, index=True, unique=True)
    release_date: datetime = Field(default_factory=utc_now, index=True)
    english_content: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )
    spanish_content: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )
    release_notes_en: str | None = Field(default=None)
    release_notes_es: str | None = Field(default=None)
