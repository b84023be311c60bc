"""Feedback and changelog schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.projecthub.models import FeedbackCategory, FeedbackPriority, FeedbackStatus


class FeedbackCreate(BaseModel):
    category: FeedbackCategory
    subject: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1, max_length=10000)
    priority: FeedbackPriority = FeedbackPriority.MEDIUM

    @field_validator("subject", "description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Feedback subject and description cannot be blank")
        return v


class FeedbackStatusUpdate(BaseModel):
    """Developer triage. Notes are kept unless new ones are sent."""

    status: FeedbackStatus
    developer_notes: str | None = Field(default=None, max_length=5000)


class FeedbackRead(BaseModel):
    id: UUID
    category: FeedbackCategory
    subject: str
    description: str
    status: FeedbackStatus
    priority: FeedbackPriority
    developer_notes: str | None
    client_response: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReleasedFeedbackRead(BaseModel):
    released: int


class ReleaseContent(BaseModel):
    """One language's release notes, grouped by kind of change."""

    features: list[str] | None = None
    bugfixes: list[str] | None = None
    improvements: list[str] | None = None

    @field_validator("features", "bugfixes", "improvements")
    @classmethod
    def drop_blank_items(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return [item.strip() for item in v if item.strip()]


class ChangelogCreate(BaseModel):
    version: str = Field(min_length=1, max_length=50)
    english_content: ReleaseContent
    spanish_content: ReleaseContent
    release_notes_en: str | None = Field(default=None, max_length=10000)
    release_notes_es: str | None = Field(default=None, max_length=10000)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Version cannot be empty or whitespace only")
        return v


class ChangelogRead(BaseModel):
    id: UUID
    version: str
    release_date: datetime
    english_content: ReleaseContent
    spanish_content: ReleaseContent
    release_notes_en: str | None
    release_notes_es: str | None

    model_config = {"from_attributes": True}
