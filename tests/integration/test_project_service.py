"""Integration tests for clients, projects and the project delete cascade."""

from uuid import uuid4

import pytest
from sqlmodel import select

from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.models import (
    Message,
    MessageType,
    Notification,
    ProjectStatus,
    Role,
    Thread,
)
from src.projecthub.schemas.client import ClientCreate, ClientUpdate
from src.projecthub.schemas.project import ProjectCreate
from src.projecthub.services.project_service import STATUS_THREAD_TITLE
from tests.helpers import create_client_with_project, create_thread

pytestmark = pytest.mark.integration


class TestClients:
    async def test_names_are_unique(self, services):
        await services.clients.create_client(ClientCreate(name="Agua Limpia"))

        with pytest.raises(ValueError, match="already exists"):
            await services.clients.create_client(ClientCreate(name="Agua Limpia"))

    async def test_update_only_touches_given_fields(self, services):
        client = await services.clients.create_client(
            ClientCreate(name="Panadería Sol", tech_level=2)
        )

        updated = await services.clients.update_client(client.id, ClientUpdate(language="en"))

        assert updated.language == "en"
        assert updated.tech_level == 2

    async def test_summary_counts_developer_unread(self, session, services):
        client, project = await create_client_with_project(session)
        thread = await create_thread(session, project)
        await services.threads.send_message(thread.id, Role.CLIENT, "Hola")
        await services.threads.send_message(thread.id, Role.CLIENT, "¿Hay alguien?")

        summary = await services.clients.get_client(client.id)

        assert summary.project_count == 1
        assert summary.unread_messages == 2

    async def test_activity_summary(self, session, services):
        client, project = await create_client_with_project(session)
        thread = await create_thread(session, project)
        await services.threads.send_message(thread.id, Role.CLIENT, "Hola")
        await services.threads.send_message(thread.id, Role.DEVELOPER, "Hola, ¿qué tal?")

        activity = await services.clients.activity_summary(client.id, days=7)

        assert activity.total_messages == 2
        assert activity.client_messages == 1
        assert activity.developer_messages == 1
        assert activity.active_threads == 1
        [day] = activity.daily_activity.values()
        assert day == {"client": 1, "developer": 1, "total": 2}

    async def test_activity_needs_a_positive_window(self, session, services):
        client, _ = await create_client_with_project(session)
        with pytest.raises(ValueError):
            await services.clients.activity_summary(client.id, days=0)


class TestProjects:
    async def test_create_needs_an_existing_client(self, services):
        with pytest.raises(NotFoundError):
            await services.projects.create_project(ProjectCreate(client_id=uuid4(), name="Web"))

    async def test_client_projects_with_unread(self, session, services):
        client, project = await create_client_with_project(session)
        thread = await create_thread(session, project)
        await services.threads.send_message(thread.id, Role.DEVELOPER, "Avance listo")

        [summary] = await services.projects.list_client_projects(client.id, Role.CLIENT)

        assert summary.project.id == project.id
        assert summary.unread_count == 1
        assert summary.thread_count == 1


class TestProjectStatus:
    async def test_note_opens_an_updates_thread_when_none_exists(
        self, session, services, dispatcher
    ):
        _, project = await create_client_with_project(session)

        await services.projects.update_status(
            project.id, ProjectStatus.IN_PROGRESS, note="Arrancamos el diseño"
        )

        [summary] = await services.threads.list_project_threads(project.id, Role.CLIENT)
        assert summary.thread.title == STATUS_THREAD_TITLE
        assert summary.unread_count == 1
        assert summary.last_message.message_type == MessageType.STATUS_UPDATE.value
        assert project.status == ProjectStatus.IN_PROGRESS.value
        assert len(dispatcher.scheduled) == 1

    async def test_note_goes_to_the_latest_thread(self, session, services):
        _, project = await create_client_with_project(session)
        thread = await create_thread(session, project)

        await services.projects.update_status(project.id, ProjectStatus.REVIEW, note="Revisar")

        threads = (await session.execute(select(Thread))).scalars().all()
        assert [t.id for t in threads] == [thread.id]
        assert thread.unread_count_client == 1

    async def test_same_status_without_note_is_quiet(self, session, services, dispatcher):
        _, project = await create_client_with_project(session)

        await services.projects.update_status(project.id, ProjectStatus.NOT_STARTED)

        assert dispatcher.scheduled == []


class TestDeleteProject:
    async def test_cascade_reports_what_it_removed(self, session, services):
        _, project = await create_client_with_project(session)
        thread = await create_thread(session, project)
        await services.threads.send_message(thread.id, Role.CLIENT, "Hola")
        await services.messages.send_file_message(
            thread.id,
            Role.CLIENT,
            file_id="uploads/q/logo.png",
            file_name="logo.png",
            file_type="image/png",
            file_size=10,
        )
        parent = await services.files.create_folder(project.id, "Entregas", Role.DEVELOPER)
        await services.files.create_folder(
            project.id, "Semana 1", Role.DEVELOPER, parent_folder_id=parent.id
        )

        result = await services.projects.delete_project(project.id)

        assert result.deleted_threads == 1
        assert result.deleted_messages == 2
        assert result.deleted_files == 1
        # Four defaults from the upload plus the two created here
        assert result.deleted_folders == 6
        assert result.deleted_notifications == 1
        assert (await session.execute(select(Message))).scalars().all() == []
        assert (await session.execute(select(Notification))).scalars().all() == []
        with pytest.raises(NotFoundError):
            await services.projects.require_project(project.id)

    async def test_other_projects_are_untouched(self, session, services):
        _, doomed = await create_client_with_project(session)
        _, kept = await create_client_with_project(session)
        kept_thread = await create_thread(session, kept)
        await services.threads.send_message(kept_thread.id, Role.CLIENT, "Sigo aquí")

        await services.projects.delete_project(doomed.id)

        assert len(await services.messages.list_thread_messages(kept_thread.id)) == 1
        notifications = (await session.execute(select(Notification))).scalars().all()
        assert [n.project_id for n in notifications] == [kept.id]
