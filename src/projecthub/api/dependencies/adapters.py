"""Process-wide adapters created in the app lifespan and stored on app.state."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from src.projecthub.core.live import ChangeFeed
from src.projecthub.core.notifications import TelegramNotifier
from src.projecthub.core.storage import ObjectStorage
from src.projecthub.core.translation import Translator
from src.projecthub.services.notification_service import NotificationDispatcher


def _state(request: Request, name: str) -> object | None:
    return getattr(request.app.state, name, None)


def get_change_feed(request: Request) -> ChangeFeed:
    feed = _state(request, "change_feed")
    if not isinstance(feed, ChangeFeed):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Live updates are not available",
        )
    return feed


def get_translator(request: Request) -> Translator | None:
    translator = _state(request, "translator")
    return translator if isinstance(translator, Translator) else None


def get_notifier(request: Request) -> TelegramNotifier:
    notifier = _state(request, "notifier")
    if not isinstance(notifier, TelegramNotifier):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notifications are not available",
        )
    return notifier


def get_optional_storage(request: Request) -> ObjectStorage | None:
    storage = _state(request, "storage")
    return storage if isinstance(storage, ObjectStorage) else None


def get_storage(
    storage: Annotated[ObjectStorage | None, Depends(get_optional_storage)],
) -> ObjectStorage:
    """Object storage for endpoints that cannot work without it."""
    if storage is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Object storage is not configured",
        )
    return storage


def get_dispatcher(request: Request) -> NotificationDispatcher | None:
    return getattr(request.app.state, "dispatcher", None)


Feed = Annotated[ChangeFeed, Depends(get_change_feed)]
OptionalTranslator = Annotated[Translator | None, Depends(get_translator)]
Notifier = Annotated[TelegramNotifier, Depends(get_notifier)]
OptionalStorage = Annotated[ObjectStorage | None, Depends(get_optional_storage)]
Storage = Annotated[ObjectStorage, Depends(get_storage)]
Dispatcher = Annotated[NotificationDispatcher | None, Depends(get_dispatcher)]
