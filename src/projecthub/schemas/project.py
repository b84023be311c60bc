"""Project schemas for API request/response."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.projecthub.models import ProjectPriority, ProjectStatus, ProjectType
from src.projecthub.schemas.client import ClientRead

if TYPE_CHECKING:
    from src.projecthub.services.project_service import ProjectSummary


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    client_id: UUID
    name: str = Field(min_length=1, max_length=200)
    type: ProjectType = ProjectType.OTHER
    priority: ProjectPriority = ProjectPriority.MEDIUM
    icon: str = Field(default="📁", max_length=16)
    color: str = Field(default="#3B82F6", max_length=16)
    description: str | None = Field(default=None, max_length=2000)
    deadline: datetime | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or whitespace only")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Status has its own endpoint."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    type: ProjectType | None = None
    priority: ProjectPriority | None = None
    icon: str | None = Field(default=None, max_length=16)
    color: str | None = Field(default=None, max_length=16)
    description: str | None = Field(default=None, max_length=2000)
    deadline: datetime | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Project name cannot be empty or whitespace only")
        return v


class ProjectRead(BaseModel):
    id: UUID
    client_id: UUID
    name: str
    type: ProjectType
    status: ProjectStatus
    priority: ProjectPriority
    icon: str
    color: str
    description: str | None
    deadline: datetime | None
    is_archived: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectSummaryRead(ProjectRead):
    """Project with thread counts and one viewer's unread total."""

    unread_count: int = 0
    thread_count: int = 0
    active_threads: int = 0
    last_activity: datetime | None = None
    client: ClientRead | None = None

    @classmethod
    def from_summary(cls, summary: "ProjectSummary") -> "ProjectSummaryRead":
        return cls(
            **ProjectRead.model_validate(summary.project).model_dump(),
            unread_count=summary.unread_count,
            thread_count=summary.thread_count,
            active_threads=summary.active_threads,
            last_activity=summary.last_activity,
            client=ClientRead.model_validate(summary.client) if summary.client else None,
        )


class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus
    note: str | None = Field(default=None, max_length=5000)


class ArchiveToggle(BaseModel):
    archived: bool


class ProjectDeletionRead(BaseModel):
    project_id: UUID
    deleted_threads: int
    deleted_messages: int
    deleted_files: int
    deleted_folders: int
    deleted_notifications: int
