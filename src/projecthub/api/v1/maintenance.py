"""One-off data maintenance: legacy feedback migration and greeting cleanup."""

from fastapi import APIRouter

from src.projecthub.api.dependencies import MigrationServiceDep
from src.projecthub.core.config import get_settings
from src.projecthub.schemas.maintenance import (
    CleanupResultRead,
    MigrationRequest,
    MigrationResultRead,
    MigrationStatusRead,
)

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.post("/migrate-feedback", response_model=MigrationResultRead)
async def migrate_feedback(
    service: MigrationServiceDep, request: MigrationRequest | None = None
) -> MigrationResultRead:
    """Move legacy feedback into a client, a primary project and threads.

    Idempotent: once the client exists nothing is written and its id is
    returned with migrated=false.
    """
    settings = get_settings()
    request = request or MigrationRequest()
    result = await service.migrate_feedback_data(
        request.client_name or settings.legacy_client_name,
        request.client_email or settings.legacy_client_email,
    )
    return MigrationResultRead.model_validate(result, from_attributes=True)


@router.post("/cleanup-welcome", response_model=CleanupResultRead)
async def cleanup_welcome_messages(service: MigrationServiceDep) -> CleanupResultRead:
    result = await service.cleanup_welcome_messages()
    return CleanupResultRead.model_validate(result, from_attributes=True)


@router.get("/status", response_model=MigrationStatusRead)
async def get_migration_status(service: MigrationServiceDep) -> MigrationStatusRead:
    result = await service.status()
    return MigrationStatusRead.model_validate(result, from_attributes=True)
