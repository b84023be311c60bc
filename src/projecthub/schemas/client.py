"""Client schemas for API request/response."""

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.projecthub.models import Language

if TYPE_CHECKING:
    from src.projecthub.services.client_service import ClientActivity, ClientSummary


class ClientCreate(BaseModel):
    """Schema for creating a client."""

    name: str = Field(min_length=1, max_length=200)
    email: EmailStr | None = None
    language: Language = Language.ES
    tech_level: int = Field(default=3, ge=1, le=5)
    timezone: str = Field(default="America/Mexico_City", max_length=64)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Client name cannot be empty or whitespace only")
        return v


class ClientUpdate(BaseModel):
    """Schema for updating a client. Unset fields are left alone."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    language: Language | None = None
    tech_level: int | None = Field(default=None, ge=1, le=5)
    timezone: str | None = Field(default=None, max_length=64)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Client name cannot be empty or whitespace only")
        return v


class ClientRead(BaseModel):
    id: UUID
    name: str
    email: str | None
    language: Language
    tech_level: int
    timezone: str
    created_at: datetime
    last_active: datetime

    model_config = {"from_attributes": True}


class ClientSummaryRead(ClientRead):
    """Client with project counts and the developer's unread total."""

    project_count: int = 0
    active_projects: int = 0
    unread_messages: int = 0

    @classmethod
    def from_summary(cls, summary: "ClientSummary") -> "ClientSummaryRead":
        return cls(
            **ClientRead.model_validate(summary.client).model_dump(),
            project_count=summary.project_count,
            active_projects=summary.active_projects,
            unread_messages=summary.unread_messages,
        )


class DailyActivity(BaseModel):
    day: date
    client: int = 0
    developer: int = 0
    total: int = 0


class ClientActivityRead(BaseModel):
    client_id: UUID
    days: int
    total_messages: int
    client_messages: int
    developer_messages: int
    total_projects: int
    active_projects: int
    active_threads: int
    daily_activity: list[DailyActivity]
    most_recent_activity: datetime | None

    @classmethod
    def from_activity(cls, activity: "ClientActivity") -> "ClientActivityRead":
        return cls(
            client_id=activity.client_id,
            days=activity.days,
            total_messages=activity.total_messages,
            client_messages=activity.client_messages,
            developer_messages=activity.developer_messages,
            total_projects=activity.total_projects,
            active_projects=activity.active_projects,
            active_threads=activity.active_threads,
            daily_activity=[
                DailyActivity(
                    day=day,
                    client=counts.get("client", 0),
                    developer=counts.get("developer", 0),
                    total=counts.get("total", 0),
                )
                for day, counts in activity.daily_activity.items()
            ],
            most_recent_activity=activity.most_recent_activity,
        )
