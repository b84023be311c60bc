"""Project file endpoints: catalogue, organisation and the storage boundary."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.projecthub.api.dependencies import FileServiceDep, Storage
from src.projecthub.schemas.files import (
    FileCreate,
    FileDetailRead,
    FileMove,
    FileRead,
    FileStatsRead,
    FileSystemSetupRead,
    FileTagsUpdate,
    FileUrlRead,
    OrganizeResultRead,
    SetupRequest,
    SetupStatusRead,
    SyncResultRead,
    UploadTargetCreate,
    UploadTargetRead,
)

router = APIRouter(tags=["files"])


# ---------------------------------------------------------------------------
# Project scoped
# ---------------------------------------------------------------------------


@router.get("/projects/{project_id}/files", response_model=list[FileDetailRead])
async def list_project_files(
    project_id: UUID,
    service: FileServiceDep,
    folder_id: UUID | None = None,
    file_type: str | None = None,
    search: str | None = None,
) -> list[FileDetailRead]:
    """Newest first, each with a fresh URL and the message it came from."""
    views = await service.list_project_files(project_id, folder_id, file_type, search)
    return [FileDetailRead.from_view(v) for v in views]


@router.post(
    "/projects/{project_id}/files",
    response_model=FileRead,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Project, folder or upload not found"}},
)
async def add_file_to_project(
    project_id: UUID, request: FileCreate, service: FileServiceDep
) -> FileRead:
    """Catalogue an uploaded object; without a folder it is filed by type."""
    project_file = await service.add_file_to_project(
        project_id,
        file_id=request.file_id,
        file_name=request.file_name,
        file_type=request.file_type,
        file_size=request.file_size,
        uploaded_by=request.uploaded_by,
        folder_id=request.folder_id,
        tags=request.tags,
    )
    return FileRead.model_validate(project_file)


@router.get("/projects/{project_id}/files/search", response_model=list[FileDetailRead])
async def search_project_files(
    project_id: UUID,
    service: FileServiceDep,
    q: Annotated[str, Query(min_length=1, max_length=200)],
    file_type: str | None = None,
) -> list[FileDetailRead]:
    views = await service.search_files(project_id, q, file_type)
    return [FileDetailRead.from_view(v) for v in views]


@router.get("/projects/{project_id}/files/stats", response_model=FileStatsRead)
async def get_project_file_stats(
    project_id: UUID,
    service: FileServiceDep,
    recent_days: Annotated[int, Query(ge=1, le=365)] = 7,
) -> FileStatsRead:
    stats = await service.file_stats(project_id, recent_days)
    return FileStatsRead.model_validate(stats, from_attributes=True)


@router.get("/projects/{project_id}/files/setup", response_model=SetupStatusRead)
async def check_project_setup(project_id: UUID, service: FileServiceDep) -> SetupStatusRead:
    status_ = await service.check_setup(project_id)
    return SetupStatusRead.model_validate(status_, from_attributes=True)


@router.post("/projects/{project_id}/files/setup", response_model=FileSystemSetupRead)
async def setup_project_file_system(
    project_id: UUID, service: FileServiceDep, request: SetupRequest | None = None
) -> FileSystemSetupRead:
    """Default folders, message sync and organising. Safe to call repeatedly."""
    created_by = request.created_by if request else SetupRequest().created_by
    result = await service.setup_project_file_system(project_id, created_by)
    return FileSystemSetupRead.model_validate(result, from_attributes=True)


@router.post("/projects/{project_id}/files/organize", response_model=OrganizeResultRead)
async def auto_organize_files(project_id: UUID, service: FileServiceDep) -> OrganizeResultRead:
    return OrganizeResultRead(organized=await service.auto_organize(project_id))


@router.post("/projects/{project_id}/files/sync", response_model=SyncResultRead)
async def sync_message_files(project_id: UUID, service: FileServiceDep) -> SyncResultRead:
    """Catalogue attachments from the project's messages that are not listed yet."""
    return SyncResultRead(synced=await service.sync_message_files(project_id))


# ---------------------------------------------------------------------------
# Storage boundary
# ---------------------------------------------------------------------------


@router.post(
    "/files/uploads",
    response_model=UploadTargetRead,
    status_code=status.HTTP_201_CREATED,
    responses={503: {"description": "Object storage is not configured"}},
)
async def create_upload_target(
    request: UploadTargetCreate, service: FileServiceDep, _storage: Storage
) -> UploadTargetRead:
    """Allocate a content id and a presigned PUT URL for it."""
    target = service.create_upload_target(request.file_name, request.content_type)
    return UploadTargetRead(
        file_id=target.file_id, upload_url=target.upload_url, expires_in=target.expires_in
    )


@router.get(
    "/files/url",
    response_model=FileUrlRead,
    responses={503: {"description": "Object storage is not configured"}},
)
async def get_file_url(
    file_id: Annotated[str, Query(min_length=1, max_length=300)],
    service: FileServiceDep,
    _storage: Storage,
) -> FileUrlRead:
    return FileUrlRead(file_id=file_id, url=service.get_download_url(file_id))


# ---------------------------------------------------------------------------
# Single catalogue entry
# ---------------------------------------------------------------------------


@router.get(
    "/files/{file_id}",
    response_model=FileDetailRead,
    responses={404: {"description": "File not found"}},
)
async def get_file(file_id: UUID, service: FileServiceDep) -> FileDetailRead:
    return FileDetailRead.from_view(await service.get_file(file_id))


@router.post(
    "/files/{file_id}/move",
    response_model=FileRead,
    responses={
        404: {"description": "File or folder not found"},
        422: {"description": "Folder belongs to another project"},
    },
)
async def move_file_to_folder(
    file_id: UUID, request: FileMove, service: FileServiceDep
) -> FileRead:
    """Place a file in a folder, or at the root when folder_id is null."""
    project_file = await service.move_file_to_folder(file_id, request.folder_id)
    return FileRead.model_validate(project_file)


@router.put("/files/{file_id}/tags", response_model=FileRead)
async def update_file_tags(
    file_id: UUID, request: FileTagsUpdate, service: FileServiceDep
) -> FileRead:
    return FileRead.model_validate(await service.update_file_tags(file_id, request.tags))


@router.delete(
    "/files/{file_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "File not found"}},
)
async def delete_file_from_project(file_id: UUID, service: FileServiceDep) -> Response:
    """Remove the catalogue entry; the stored object and its message stay."""
    await service.delete_file(file_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
