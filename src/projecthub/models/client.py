"""Client and project models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.projecthub.models.base import utc_now
from src.projecthub.models.enums import Language, ProjectPriority, ProjectStatus, ProjectType


class Client(SQLModel, table=True):
    """A customer. Names are unique so the legacy migration can find its client."""

    __tablename__ = "clients"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200, unique=True, index=True)
    email: str | None = Field(default=None, max_length=255)
    language: str = Field(default=Language.ES.value, max_length=5)
    tech_level: int = Field(default=3, ge=1, le=5)
    timezone: str = Field(default="America/Mexico_City", max_length=64)
    created_at: datetime = Field(default_factory=utc_now)
    last_active: datetime = Field(default_factory=utc_now)


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    client_id: UUID = Field(foreign_key="clients.id", index=True)
    name: str = Field(max_length=200)
    type: str = Field(default=ProjectType.OTHER.value, max_length=20)
    status: str = Field(default=ProjectStatus.NOT_STARTED.value, max_length=20, index=True)
    priority: str = Field(default=ProjectPriority.MEDIUM.value, max_length=10)
    icon: str = Field(default="📁", max_length=16)
    color: str = Field(default="#3B82F6", max_length=16)
    description: str | None = Field(default=None, max_length=2000)
    deadline: datetime | None = Field(default=None)
    is_archived: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
