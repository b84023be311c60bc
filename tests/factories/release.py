"""Feedback and changelog factories for test data generation."""

from polyfactory import Use

from src.projecthub.models import (
    ChangelogEntry,
    Feedback,
    FeedbackCategory,
    FeedbackPriority,
    FeedbackStatus,
)
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class FeedbackFactory(BaseFactory):
    """Factory for generating Feedback test data."""

    __model__ = Feedback

    id = Use(generate_uuid)
    category = FeedbackCategory.SUGGESTION.value
    subject = Use(lambda: f"Feedback {generate_uuid().hex[-8:]}")
    description = "El botón de contacto no se ve en móvil."
    status = FeedbackStatus.NEW.value
    priority = FeedbackPriority.MEDIUM.value
    developer_notes = None
    client_response = None
    created_at = Use(utc_now)


class ChangelogEntryFactory(BaseFactory):
    """Factory for generating ChangelogEntry test data."""

    __model__ = ChangelogEntry

    id = Use(generate_uuid)
    version = Use(lambda: f"1.{generate_uuid().int % 1000}.0")
    release_date = Use(utc_now)
    english_content = Use(
        lambda: {"features": ["File folders"], "bugfixes": None, "improvements": None}
    )
    spanish_content = Use(
        lambda: {"features": ["Carpetas de archivos"], "bugfixes": None, "improvements": None}
    )
    release_notes_en = None
    release_notes_es = None
