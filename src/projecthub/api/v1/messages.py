"""Message endpoints: edit, delete, search and statistics."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.projecthub.api.dependencies import MessageServiceDep
from src.projecthub.models import Role
from src.projecthub.schemas.thread import (
    MessageEdit,
    MessageHitRead,
    MessageRead,
    MessageStatsRead,
)

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/search", response_model=list[MessageHitRead])
async def search_messages(
    service: MessageServiceDep,
    q: Annotated[str, Query(min_length=1, max_length=200)],
    thread_id: UUID | None = None,
    project_id: UUID | None = None,
    include_private: bool = False,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[MessageHitRead]:
    hits = await service.search_messages(q, thread_id, project_id, include_private, limit)
    return [MessageHitRead.from_hit(hit) for hit in hits]


@router.get("/stats", response_model=MessageStatsRead)
async def get_message_stats(
    service: MessageServiceDep,
    days: Annotated[int, Query(ge=1, le=365)] = 30,
    thread_id: UUID | None = None,
    project_id: UUID | None = None,
) -> MessageStatsRead:
    stats = await service.message_stats(days, thread_id, project_id)
    return MessageStatsRead.model_validate(stats, from_attributes=True)


@router.patch(
    "/{message_id}",
    response_model=MessageRead,
    responses={
        403: {"description": "Only the author may edit a message"},
        404: {"description": "Message not found"},
    },
)
async def edit_message(
    message_id: UUID, request: MessageEdit, service: MessageServiceDep
) -> MessageRead:
    message = await service.edit_message(message_id, request.editor, request.content)
    return MessageRead.model_validate(message)


@router.delete(
    "/{message_id}",
    response_model=MessageRead,
    responses={
        403: {"description": "Only the author or the developer may delete"},
        404: {"description": "Message not found"},
    },
)
async def delete_message(
    message_id: UUID, deleter: Role, service: MessageServiceDep
) -> MessageRead:
    """Soft delete: the message stays with its text replaced."""
    return MessageRead.model_validate(await service.delete_message(message_id, deleter))
