"""Notification outbox schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.projecthub.models import NotificationStatus, NotificationType


class NotificationRead(BaseModel):
    id: UUID
    type: NotificationType
    recipient: str
    message: str
    thread_id: UUID | None
    project_id: UUID | None
    status: NotificationStatus
    attempts: int
    last_error: str | None
    created_at: datetime
    sent_at: datetime | None

    model_config = {"from_attributes": True}


class RetryRequest(BaseModel):
    limit: int = Field(default=50, ge=1, le=500)
    notification_id: UUID | None = None


class RetrySummaryRead(BaseModel):
    attempted: int
    successful: int
    failed: int


class ConnectionTestRead(BaseModel):
    ok: bool
    configured: bool
    error: str | None = None
