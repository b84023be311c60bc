"""Notification outbox endpoints: history, retries and a connectivity check."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Request

from src.projecthub.api.dependencies import Notifier, NotificationServiceDep
from src.projecthub.core.rate_limit import ALERT_RATE_LIMIT, limiter
from src.projecthub.models import NotificationStatus
from src.projecthub.schemas.notification import (
    ConnectionTestRead,
    NotificationRead,
    RetryRequest,
    RetrySummaryRead,
)
from src.projecthub.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=PaginatedResponse[NotificationRead])
async def list_notifications(
    service: NotificationServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Number of items per page")] = 50,
    status_filter: Annotated[NotificationStatus | None, Query(alias="status")] = None,
) -> PaginatedResponse[NotificationRead]:
    """Delivery history, newest first."""
    notifications, next_cursor, has_more = await service.history(cursor, limit, status_filter)
    return PaginatedResponse(
        items=[NotificationRead.model_validate(n) for n in notifications],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "/retry",
    response_model=RetrySummaryRead,
    responses={404: {"description": "Notification not found"}},
)
@limiter.limit(ALERT_RATE_LIMIT)
async def retry_failed_notifications(
    request: Request, service: NotificationServiceDep, retry_data: RetryRequest | None = None
) -> RetrySummaryRead:
    """Resend failed alerts (or one given alert) with a retry marker."""
    retry_data = retry_data or RetryRequest()
    summary = await service.retry_failed(retry_data.limit, retry_data.notification_id)
    return RetrySummaryRead.model_validate(summary, from_attributes=True)


@router.post("/test", response_model=ConnectionTestRead)
@limiter.limit(ALERT_RATE_LIMIT)
async def test_notification_connection(
    request: Request, service: NotificationServiceDep, notifier: Notifier
) -> ConnectionTestRead:
    result = await service.test_connection()
    return ConnectionTestRead(ok=result.ok, configured=notifier.configured, error=result.error)


@router.post(
    "/{notification_id}/deliver",
    response_model=NotificationRead,
    responses={404: {"description": "Notification not found"}},
)
async def deliver_notification(
    notification_id: UUID, service: NotificationServiceDep
) -> NotificationRead:
    """Deliver one pending alert now instead of waiting for the worker."""
    return NotificationRead.model_validate(await service.deliver(notification_id))
