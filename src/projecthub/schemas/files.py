"""Folder and project file schemas."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.projecthub.models import FolderBucket, Role
from src.projecthub.schemas.thread import MessageRead

if TYPE_CHECKING:
    from src.projecthub.models import Folder
    from src.projecthub.services.file_service import FileView


class FolderCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    created_by: Role = Role.DEVELOPER
    parent_folder_id: UUID | None = None
    color: str | None = Field(default=None, max_length=16)
    icon: str | None = Field(default=None, max_length=16)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Folder name cannot be empty or whitespace only")
        return v


class FolderRead(BaseModel):
    id: UUID
    project_id: UUID
    parent_folder_id: UUID | None
    name: str
    bucket: FolderBucket | None
    color: str
    icon: str
    created_by: Role
    created_at: datetime
    file_count: int = 0

    model_config = {"from_attributes": True}

    @classmethod
    def from_folder(cls, folder: "Folder", file_count: int) -> "FolderRead":
        read = cls.model_validate(folder)
        read.file_count = file_count
        return read


class FileCreate(BaseModel):
    """Catalogue an uploaded object. Without folder_id the file is auto-filed."""

    file_id: str = Field(min_length=1, max_length=300)
    file_name: str = Field(min_length=1, max_length=255)
    file_type: str = Field(default="application/octet-stream", max_length=127)
    file_size: int = Field(default=0, ge=0)
    uploaded_by: Role
    folder_id: UUID | None = None
    tags: list[str] = Field(default_factory=list, max_length=50)


class FileRead(BaseModel):
    id: UUID
    project_id: UUID
    folder_id: UUID | None
    message_id: UUID | None
    file_id: str
    file_name: str
    file_type: str
    file_size: int
    file_url: str | None
    tags: list[str]
    uploaded_by: Role
    uploaded_at: datetime
    moved_at: datetime | None
    manually_placed: bool

    model_config = {"from_attributes": True}


class FileDetailRead(FileRead):
    """Catalogue entry with a fresh URL and the message it came from."""

    url: str | None = None
    message: MessageRead | None = None

    @classmethod
    def from_view(cls, view: "FileView") -> "FileDetailRead":
        return cls(
            **FileRead.model_validate(view.file).model_dump(),
            url=view.url,
            message=MessageRead.model_validate(view.message) if view.message else None,
        )


class FileMove(BaseModel):
    """Target folder; null sends the file to the project root."""

    folder_id: UUID | None = None


class FileTagsUpdate(BaseModel):
    tags: list[str] = Field(max_length=50)


class FileStatsRead(BaseModel):
    total_files: int
    total_size: int
    by_type: dict[str, int]
    recent_uploads: int


class SetupRequest(BaseModel):
    created_by: Role = Role.DEVELOPER


class FileSystemSetupRead(BaseModel):
    folders_created: int
    files_synced: int
    files_organized: int
    summary: str


class SetupStatusRead(BaseModel):
    folders_count: int
    files_count: int
    is_setup: bool
    needs_setup: bool


class OrganizeResultRead(BaseModel):
    organized: int


class SyncResultRead(BaseModel):
    synced: int


class UploadTargetCreate(BaseModel):
    file_name: str = Field(min_length=1, max_length=255)
    content_type: str = Field(default="application/octet-stream", max_length=127)


class UploadTargetRead(BaseModel):
    file_id: str
    upload_url: str
    expires_in: int


class FileUrlRead(BaseModel):
    file_id: str
    url: str
