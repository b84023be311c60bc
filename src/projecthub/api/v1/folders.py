"""Project folder endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.projecthub.api.dependencies import FileServiceDep
from src.projecthub.schemas.files import FolderCreate, FolderRead

router = APIRouter(prefix="/projects/{project_id}/folders", tags=["folders"])


@router.get("", response_model=list[FolderRead])
async def list_folders(
    project_id: UUID,
    service: FileServiceDep,
    parent_folder_id: UUID | None = None,
) -> list[FolderRead]:
    """One level of the folder tree, sorted by name, with file counts."""
    folders = await service.list_folders(project_id, parent_folder_id)
    return [FolderRead.from_folder(folder, count) for folder, count in folders]


@router.post(
    "",
    response_model=FolderRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Project or parent folder not found"},
        422: {"description": "Parent folder belongs to another project"},
    },
)
async def create_folder(
    project_id: UUID, request: FolderCreate, service: FileServiceDep
) -> FolderRead:
    folder = await service.create_folder(
        project_id,
        request.name,
        request.created_by,
        parent_folder_id=request.parent_folder_id,
        color=request.color,
        icon=request.icon,
    )
    return FolderRead.from_folder(folder, 0)
