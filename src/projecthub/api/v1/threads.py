"""Thread endpoints: conversations, their messages and unread counters."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Request, Response, status

from src.projecthub.api.dependencies import MessageServiceDep, ThreadServiceDep
from src.projecthub.core.rate_limit import MESSAGE_RATE_LIMIT, limiter
from src.projecthub.models import Role
from src.projecthub.schemas.project import ArchiveToggle
from src.projecthub.schemas.thread import (
    DeveloperNoteCreate,
    FileMessageCreate,
    MarkRead,
    MessageCreate,
    MessageRead,
    ThreadCreate,
    ThreadRead,
    ThreadStatusUpdate,
    ThreadSummaryRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/threads", tags=["threads"])


@router.post(
    "",
    response_model=ThreadRead,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Project not found"}},
)
async def create_thread(request: ThreadCreate, service: ThreadServiceDep) -> ThreadRead:
    """Open a thread. An initial message is unread for the other role."""
    thread = await service.create_thread(
        request.project_id,
        request.title,
        request.created_by,
        priority=request.priority,
        initial_message=request.initial_message,
        translate=request.translate,
    )
    return ThreadRead.model_validate(thread)


@router.get("/unread-count", response_model=UnreadCountRead)
async def get_total_unread(service: ThreadServiceDep, viewer: Role) -> UnreadCountRead:
    """Sum of the viewer's unread counters over non-archived threads."""
    return UnreadCountRead(viewer=viewer, unread_count=await service.total_unread(viewer))


@router.get("/recent", response_model=list[ThreadSummaryRead])
async def get_recent_activity(
    service: ThreadServiceDep,
    viewer: Role = Role.DEVELOPER,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[ThreadSummaryRead]:
    summaries = await service.recent_activity(viewer, limit)
    return [ThreadSummaryRead.from_summary(s) for s in summaries]


@router.get("/search", response_model=list[ThreadSummaryRead])
async def search_threads(
    service: ThreadServiceDep,
    q: Annotated[str, Query(min_length=1, max_length=200)],
    viewer: Role = Role.DEVELOPER,
    project_id: UUID | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> list[ThreadSummaryRead]:
    summaries = await service.search_threads(q, viewer, project_id, limit)
    return [ThreadSummaryRead.from_summary(s) for s in summaries]


@router.get(
    "/{thread_id}",
    response_model=ThreadSummaryRead,
    responses={404: {"description": "Thread not found"}},
)
async def get_thread(
    thread_id: UUID, service: ThreadServiceDep, viewer: Role = Role.DEVELOPER
) -> ThreadSummaryRead:
    return ThreadSummaryRead.from_summary(await service.get_thread(thread_id, viewer))


@router.get("/{thread_id}/messages", response_model=list[MessageRead])
async def list_thread_messages(
    thread_id: UUID,
    service: MessageServiceDep,
    include_private: bool = False,
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
) -> list[MessageRead]:
    """Oldest first. Private notes are only returned when asked for."""
    messages = await service.list_thread_messages(thread_id, include_private, limit)
    return [MessageRead.model_validate(m) for m in messages]


@router.post(
    "/{thread_id}/messages",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Thread not found"},
        429: {"description": "Too many messages from this address"},
    },
)
@limiter.limit(MESSAGE_RATE_LIMIT)
async def send_message(
    request: Request, thread_id: UUID, message_data: MessageCreate, service: ThreadServiceDep
) -> MessageRead:
    message = await service.send_message(
        thread_id,
        message_data.author,
        message_data.content,
        is_private=message_data.is_private,
        translate=message_data.translate,
    )
    return MessageRead.model_validate(message)


@router.post(
    "/{thread_id}/files",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Thread not found or upload missing"}},
)
async def send_file_message(
    thread_id: UUID, request: FileMessageCreate, service: MessageServiceDep
) -> MessageRead:
    """Post an attachment and add it to the project's files."""
    message = await service.send_file_message(
        thread_id,
        request.author,
        request.file_id,
        request.file_name,
        request.file_type,
        request.file_size,
        caption=request.caption,
        file_url=request.file_url,
    )
    return MessageRead.model_validate(message)


@router.post(
    "/{thread_id}/notes",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_developer_note(
    thread_id: UUID, request: DeveloperNoteCreate, service: MessageServiceDep
) -> MessageRead:
    """Private note; invisible to the client and no counter change."""
    return MessageRead.model_validate(await service.add_developer_note(thread_id, request.note))


@router.post("/{thread_id}/read", response_model=ThreadRead)
async def mark_thread_as_read(
    thread_id: UUID, request: MarkRead, service: ThreadServiceDep
) -> ThreadRead:
    return ThreadRead.model_validate(await service.mark_as_read(thread_id, request.reader))


@router.post("/{thread_id}/status", response_model=ThreadRead)
async def update_thread_status(
    thread_id: UUID, request: ThreadStatusUpdate, service: ThreadServiceDep
) -> ThreadRead:
    thread = await service.update_status(
        thread_id, request.status, request.updated_by, request.note
    )
    return ThreadRead.model_validate(thread)


@router.post("/{thread_id}/archive", response_model=ThreadRead)
async def toggle_thread_archive(
    thread_id: UUID, request: ArchiveToggle, service: ThreadServiceDep
) -> ThreadRead:
    return ThreadRead.model_validate(await service.toggle_archive(thread_id, request.archived))


@router.delete(
    "/{thread_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Thread not found"},
        500: {"description": "Cascade failed; nothing was deleted"},
    },
)
async def delete_thread(thread_id: UUID, service: ThreadServiceDep) -> Response:
    await service.delete_thread(thread_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
