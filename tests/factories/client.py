"""Client and project factories for test data generation."""

from polyfactory import Use

from src.projecthub.models import (
    Client,
    Language,
    Project,
    ProjectPriority,
    ProjectStatus,
    ProjectType,
)
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class ClientFactory(BaseFactory):
    """Factory for generating Client test data."""

    __model__ = Client

    id = Use(generate_uuid)
    name = Use(lambda: f"Test Client {generate_uuid().hex[-8:]}")
    email = None
    language = Language.ES.value
    tech_level = 3
    timezone = "America/Mexico_City"
    created_at = Use(utc_now)
    last_active = Use(utc_now)

    @classmethod
    def english(cls, **kwargs):
        """Create a client who reads English."""
        return cls.build(language=Language.EN.value, **kwargs)


class ProjectFactory(BaseFactory):
    """Factory for generating Project test data."""

    __model__ = Project

    id = Use(generate_uuid)
    client_id = None  # Required FK - must be set explicitly
    name = Use(lambda: f"Test Project {generate_uuid().hex[-8:]}")
    type = ProjectType.WEBSITE.value
    status = ProjectStatus.NOT_STARTED.value
    priority = ProjectPriority.MEDIUM.value
    icon = "📁"
    color = "#3B82F6"
    description = None
    deadline = None
    is_archived = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)
