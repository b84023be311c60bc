"""Client endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.projecthub.api.dependencies import ClientServiceDep, ProjectServiceDep
from src.projecthub.models import Role
from src.projecthub.schemas.client import (
    ClientActivityRead,
    ClientCreate,
    ClientRead,
    ClientSummaryRead,
    ClientUpdate,
)
from src.projecthub.schemas.project import ProjectSummaryRead

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post(
    "",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Client created"},
        409: {"description": "Client with this name already exists"},
    },
)
async def create_client(request: ClientCreate, service: ClientServiceDep) -> ClientRead:
    try:
        client = await service.create_client(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return ClientRead.model_validate(client)


@router.get("", response_model=list[ClientSummaryRead])
async def list_clients(service: ClientServiceDep) -> list[ClientSummaryRead]:
    """All clients, most recently active first, with the developer's unread total."""
    return [ClientSummaryRead.from_summary(s) for s in await service.list_clients()]


@router.get(
    "/{client_id}",
    response_model=ClientSummaryRead,
    responses={404: {"description": "Client not found"}},
)
async def get_client(client_id: UUID, service: ClientServiceDep) -> ClientSummaryRead:
    return ClientSummaryRead.from_summary(await service.get_client(client_id))


@router.patch(
    "/{client_id}",
    response_model=ClientRead,
    responses={
        404: {"description": "Client not found"},
        409: {"description": "Client with this name already exists"},
    },
)
async def update_client(
    client_id: UUID, request: ClientUpdate, service: ClientServiceDep
) -> ClientRead:
    try:
        client = await service.update_client(client_id, request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return ClientRead.model_validate(client)


@router.post("/{client_id}/touch", response_model=ClientRead)
async def touch_client_activity(client_id: UUID, service: ClientServiceDep) -> ClientRead:
    """Record that the client was active just now."""
    return ClientRead.model_validate(await service.touch_activity(client_id))


@router.get("/{client_id}/activity", response_model=ClientActivityRead)
async def get_client_activity(
    client_id: UUID,
    service: ClientServiceDep,
    days: Annotated[int, Query(ge=1, le=365)] = 30,
) -> ClientActivityRead:
    """Messages per day across the client's projects."""
    return ClientActivityRead.from_activity(await service.activity_summary(client_id, days))


@router.get("/{client_id}/projects", response_model=list[ProjectSummaryRead])
async def list_client_projects(
    client_id: UUID,
    service: ProjectServiceDep,
    viewer: Role = Role.CLIENT,
    include_archived: bool = False,
) -> list[ProjectSummaryRead]:
    summaries = await service.list_client_projects(client_id, viewer, include_archived)
    return [ProjectSummaryRead.from_summary(s) for s in summaries]
