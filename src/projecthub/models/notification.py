"""Outbound alert outbox."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.projecthub.models.base import utc_now
from src.projecthub.models.enums import NotificationStatus, NotificationType


class Notification(SQLModel, table=True):
    """Delivery record written in the same transaction as the event it reports.

    thread_id / project_id are plain indexed references, not foreign keys:
    delivery history never blocks deleting business data.
    """

    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    type: str = Field(default=NotificationType.TELEGRAM.value, max_length=20)
    recipient: str = Field(max_length=255)
    message: str
    thread_id: UUID | None = Field(default=None, index=True)
    project_id: UUID | None = Field(default=None, index=True)
    status: str = Field(default=NotificationStatus.PENDING.value, max_length=20, index=True)
    attempts: int = Field(default=0)
    last_error: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    sent_at: datetime | None = Field(default=None)
