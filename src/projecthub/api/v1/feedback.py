"""Feedback endpoints: submission, triage and release."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.projecthub.api.dependencies import FeedbackServiceDep
from src.projecthub.models import FeedbackStatus
from src.projecthub.schemas.release import (
    FeedbackCreate,
    FeedbackRead,
    FeedbackStatusUpdate,
    ReleasedFeedbackRead,
)

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackRead, status_code=status.HTTP_201_CREATED)
async def create_feedback(request: FeedbackCreate, service: FeedbackServiceDep) -> FeedbackRead:
    return FeedbackRead.model_validate(await service.create_feedback(request))


@router.get("", response_model=list[FeedbackRead])
async def list_feedback(
    service: FeedbackServiceDep,
    status_filter: Annotated[FeedbackStatus | None, Query(alias="status")] = None,
) -> list[FeedbackRead]:
    """Newest first."""
    return [FeedbackRead.model_validate(f) for f in await service.list_feedback(status_filter)]


@router.post("/release", response_model=ReleasedFeedbackRead)
async def release_completed_feedback(service: FeedbackServiceDep) -> ReleasedFeedbackRead:
    """Mark every completed item as released."""
    return ReleasedFeedbackRead(released=await service.mark_completed_as_released())


@router.post(
    "/{feedback_id}/status",
    response_model=FeedbackRead,
    responses={404: {"description": "Feedback not found"}},
)
async def update_feedback_status(
    feedback_id: UUID, request: FeedbackStatusUpdate, service: FeedbackServiceDep
) -> FeedbackRead:
    feedback = await service.update_status(feedback_id, request.status, request.developer_notes)
    return FeedbackRead.model_validate(feedback)
