"""Project endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.projecthub.api.dependencies import ProjectServiceDep, ThreadServiceDep
from src.projecthub.models import ProjectStatus, Role
from src.projecthub.schemas.project import (
    ArchiveToggle,
    ProjectCreate,
    ProjectDeletionRead,
    ProjectRead,
    ProjectStatusUpdate,
    ProjectSummaryRead,
    ProjectUpdate,
)
from src.projecthub.schemas.thread import ThreadSummaryRead

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Client not found"}},
)
async def create_project(request: ProjectCreate, service: ProjectServiceDep) -> ProjectRead:
    return ProjectRead.model_validate(await service.create_project(request))


@router.get("", response_model=list[ProjectSummaryRead])
async def list_projects(
    service: ProjectServiceDep,
    status_filter: Annotated[ProjectStatus | None, Query(alias="status")] = None,
    viewer: Role = Role.DEVELOPER,
) -> list[ProjectSummaryRead]:
    """Non-archived projects, optionally of one status."""
    summaries = await service.list_by_status(status_filter, viewer)
    return [ProjectSummaryRead.from_summary(s) for s in summaries]


@router.get(
    "/{project_id}",
    response_model=ProjectSummaryRead,
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: UUID, service: ProjectServiceDep, viewer: Role = Role.DEVELOPER
) -> ProjectSummaryRead:
    return ProjectSummaryRead.from_summary(await service.get_project(project_id, viewer))


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    responses={404: {"description": "Project not found"}},
)
async def update_project(
    project_id: UUID, request: ProjectUpdate, service: ProjectServiceDep
) -> ProjectRead:
    return ProjectRead.model_validate(await service.update_project(project_id, request))


@router.post("/{project_id}/archive", response_model=ProjectRead)
async def toggle_project_archive(
    project_id: UUID, request: ArchiveToggle, service: ProjectServiceDep
) -> ProjectRead:
    project = await service.toggle_archive(project_id, request.archived)
    return ProjectRead.model_validate(project)


@router.post(
    "/{project_id}/status",
    response_model=ProjectRead,
    responses={404: {"description": "Project not found"}},
)
async def update_project_status(
    project_id: UUID, request: ProjectStatusUpdate, service: ProjectServiceDep
) -> ProjectRead:
    """Change the status; a note is also posted to the client as a status message."""
    project = await service.update_status(project_id, request.status, request.note)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    response_model=ProjectDeletionRead,
    responses={
        404: {"description": "Project not found"},
        500: {"description": "Cascade failed; nothing was deleted"},
    },
)
async def delete_project(project_id: UUID, service: ProjectServiceDep) -> ProjectDeletionRead:
    """Delete the project with its threads, messages, files, folders and notifications."""
    result = await service.delete_project(project_id)
    return ProjectDeletionRead.model_validate(result, from_attributes=True)


@router.get("/{project_id}/threads", response_model=list[ThreadSummaryRead])
async def list_project_threads(
    project_id: UUID,
    service: ThreadServiceDep,
    viewer: Role = Role.DEVELOPER,
    include_archived: bool = False,
) -> list[ThreadSummaryRead]:
    summaries = await service.list_project_threads(project_id, viewer, include_archived)
    return [ThreadSummaryRead.from_summary(s) for s in summaries]
