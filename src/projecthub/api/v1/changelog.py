"""Changelog endpoints."""

from fastapi import APIRouter, HTTPException, status

from src.projecthub.api.dependencies import ChangelogServiceDep
from src.projecthub.schemas.release import ChangelogCreate, ChangelogRead

router = APIRouter(prefix="/changelog", tags=["changelog"])


@router.post(
    "",
    response_model=ChangelogRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Version already published"}},
)
async def create_changelog_entry(
    request: ChangelogCreate, service: ChangelogServiceDep
) -> ChangelogRead:
    try:
        entry = await service.create_entry(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return ChangelogRead.model_validate(entry)


@router.get("", response_model=list[ChangelogRead])
async def list_changelog(service: ChangelogServiceDep) -> list[ChangelogRead]:
    """Newest release first."""
    return [ChangelogRead.model_validate(e) for e in await service.list_entries()]


@router.get(
    "/{version}",
    response_model=ChangelogRead,
    responses={404: {"description": "Version not found"}},
)
async def get_changelog_entry(version: str, service: ChangelogServiceDep) -> ChangelogRead:
    return ChangelogRead.model_validate(await service.get_by_version(version))
