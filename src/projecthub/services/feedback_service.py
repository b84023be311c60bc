"""Feedback workflow: submission, developer triage and release."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.core.logging import get_logger
from src.projecthub.models import Feedback, FeedbackStatus
from src.projecthub.models.base import utc_now
from src.projecthub.repositories import FeedbackRepository
from src.projecthub.schemas.release import FeedbackCreate

logger = get_logger(__name__)


class FeedbackService:
    def __init__(self, session: AsyncSession, feedback_repo: FeedbackRepository):
        self.session = session
        self.feedback_repo = feedback_repo

    async def require_feedback(self, feedback_id: UUID, lock: bool = False) -> Feedback:
        if lock:
            feedback = await self.feedback_repo.get_for_update(feedback_id)
        else:
            feedback = await self.feedback_repo.get_by_id(feedback_id)
        if feedback is None:
            raise NotFoundError("Feedback", feedback_id)
        return feedback

    async def create_feedback(self, data: FeedbackCreate) -> Feedback:
        """Submit feedback. It always starts as new."""
        try:
            feedback = Feedback(
                category=data.category.value,
                subject=data.subject,
                description=data.description,
                priority=data.priority.value,
                status=FeedbackStatus.NEW.value,
                created_at=utc_now(),
            )
            self.feedback_repo.add(feedback)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Feedback submitted",
            feedback_id=str(feedback.id),
            category=feedback.category,
            priority=feedback.priority,
        )
        return feedback

    async def list_feedback(self, status: FeedbackStatus | None = None) -> list[Feedback]:
        """Newest first, optionally of one status."""
        return await self.feedback_repo.list_newest(status)

    async def update_status(
        self,
        feedback_id: UUID,
        status: FeedbackStatus,
        developer_notes: str | None = None,
    ) -> Feedback:
        """Move feedback to any status. Existing notes stay unless replaced.

        Raises:
            NotFoundError: Unknown feedback.
        """
        try:
            feedback = await self.require_feedback(feedback_id, lock=True)
            previous = feedback.status
            feedback.status = status.value
            if developer_notes is not None:
                feedback.developer_notes = developer_notes.strip() or None
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Feedback status updated",
            feedback_id=str(feedback_id),
            previous=previous,
            status=status.value,
        )
        return feedback

    async def mark_completed_as_released(self) -> int:
        """Release every completed item in one transaction. Returns how many moved."""
        try:
            completed = await self.feedback_repo.lock_by_status(FeedbackStatus.COMPLETED)
            for feedback in completed:
                feedback.status = FeedbackStatus.RELEASED.value
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to release completed feedback", error=str(e))
            raise

        logger.info("Completed feedback released", count=len(completed))
        return len(completed)
