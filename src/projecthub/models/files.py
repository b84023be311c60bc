"""Project file catalogue: folders and files."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.projecthub.models.base import utc_now


class Folder(SQLModel, table=True):
    """A project folder.

    bucket is set only on the default taxonomy folders; the unique
    (project_id, bucket) pair keeps concurrent setups from creating two sets.
    User-created folders leave it NULL, which the constraint does not compare.
    """

    __tablename__ = "project_folders"
    __table_args__ = (UniqueConstraint("project_id", "bucket", name="uq_project_folders_bucket"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    parent_folder_id: UUID | None = Field(
        default=None, foreign_key="project_folders.id", index=True
    )
    name: str = Field(max_length=100)
    bucket: str | None = Field(default=None, max_length=20)
    color: str = Field(default="#3B82F6", max_length=16)
    icon: str = Field(default="📁", max_length=16)
    created_by: str = Field(max_length=10)
    created_at: datetime = Field(default_factory=utc_now)


class ProjectFile(SQLModel, table=True):
    """Project-level catalogue entry for one stored object.

    folder_id NULL with manually_placed False means "not organised yet";
    folder_id NULL with manually_placed True means the user put it at the root.
    """

    __tablename__ = "project_files"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    folder_id: UUID | None = Field(default=None, foreign_key="project_folders.id", index=True)
    message_id: UUID | None = Field(default=None, foreign_key="messages.id", index=True)
    file_id: str = Field(max_length=300)
    file_name: str = Field(max_length=255)
    file_type: str = Field(max_length=127, index=True)
    file_size: int = Field(default=0, ge=0)
    file_url: str | None = Field(default=None)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    uploaded_by: str = Field(max_length=10)
    uploaded_at: datetime = Field(default_factory=utc_now, index=True)
    moved_at: datetime | None = Field(default=None)
    manually_placed: bool = Field(default=False)
