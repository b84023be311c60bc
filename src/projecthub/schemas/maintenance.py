"""Legacy migration and cleanup schemas."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class MigrationRequest(BaseModel):
    """Unset fields fall back to the configured legacy client."""

    client_name: str | None = Field(default=None, min_length=1, max_length=200)
    client_email: EmailStr | None = None


class MigrationResultRead(BaseModel):
    migrated: bool
    client_id: UUID
    message: str
    main_project_id: UUID | None = None
    migrated_feedback_count: int = 0


class CleanupResultRead(BaseModel):
    updated_threads: int
    deleted_messages: int


class MigrationStatusRead(BaseModel):
    clients_count: int
    projects_count: int
    threads_count: int
    messages_count: int
    legacy_feedback_count: int
    original_feedback_count: int
    remaining_feedback_count: int
    migration_completed: bool
