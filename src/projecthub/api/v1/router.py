from fastapi import APIRouter

from src.projecthub.api.v1 import (
    changelog,
    clients,
    feedback,
    files,
    folders,
    live,
    maintenance,
    messages,
    notifications,
    projects,
    threads,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(clients.router)
api_router.include_router(projects.router)
api_router.include_router(threads.router)
api_router.include_router(messages.router)
api_router.include_router(folders.router)
api_router.include_router(files.router)
api_router.include_router(notifications.router)
api_router.include_router(feedback.router)
api_router.include_router(changelog.router)
api_router.include_router(maintenance.router)
api_router.include_router(live.router)
