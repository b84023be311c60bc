"""Integration tests for the folder taxonomy and project file catalogue."""

from uuid import uuid4

import pytest

from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.models import FolderBucket, ProjectFile, Role
from tests.factories import MessageFactory
from tests.helpers import create_client_with_project, create_thread

pytestmark = pytest.mark.integration


def unorganized_file(project_id, file_type: str, name: str = "archivo") -> ProjectFile:
    return ProjectFile(
        project_id=project_id,
        file_id=f"uploads/{uuid4().hex}/{name}",
        file_name=name,
        file_type=file_type,
        file_size=10,
        uploaded_by=Role.CLIENT.value,
    )


async def folders_by_name(services, project_id):
    return {folder.name: folder for folder, _ in await services.files.list_folders(project_id)}


class TestDefaultFolders:
    async def test_setup_is_idempotent(self, session, services):
        _, project = await create_client_with_project(session)

        assert await services.files.setup_default_folders(project.id, Role.DEVELOPER) == 4
        assert await services.files.setup_default_folders(project.id, Role.DEVELOPER) == 0

        folders = await folders_by_name(services, project.id)
        assert sorted(folders) == sorted(b.value for b in FolderBucket)
        status = await services.files.check_setup(project.id)
        assert status.is_setup
        assert status.folders_count == 4

    async def test_unknown_project(self, services):
        with pytest.raises(NotFoundError):
            await services.files.setup_default_folders(uuid4(), Role.DEVELOPER)


class TestAddFile:
    async def test_png_lands_in_images_without_prior_setup(self, session, services):
        _, project = await create_client_with_project(session)

        project_file = await services.files.add_file_to_project(
            project.id,
            file_id="uploads/x/logo.png",
            file_name="logo.png",
            file_type="image/png",
            file_size=2048,
            uploaded_by=Role.CLIENT,
            tags=["Logo", "logo ", "final"],
        )

        folders = await folders_by_name(services, project.id)
        assert project_file.folder_id == folders["Images"].id
        assert not project_file.manually_placed
        assert project_file.tags == ["Logo", "final"]

    async def test_explicit_folder_counts_as_manual(self, session, services):
        _, project = await create_client_with_project(session)
        folder = await services.files.create_folder(project.id, "Contratos", Role.DEVELOPER)

        project_file = await services.files.add_file_to_project(
            project.id,
            file_id="uploads/x/contrato.pdf",
            file_name="contrato.pdf",
            file_type="application/pdf",
            file_size=100,
            uploaded_by=Role.DEVELOPER,
            folder_id=folder.id,
        )

        assert project_file.folder_id == folder.id
        assert project_file.manually_placed

    async def test_folder_from_another_project_is_rejected(self, session, services):
        _, project = await create_client_with_project(session)
        _, other = await create_client_with_project(session)
        foreign = await services.files.create_folder(other.id, "Ajena", Role.DEVELOPER)

        with pytest.raises(ValueError):
            await services.files.add_file_to_project(
                project.id,
                file_id="uploads/x/a.txt",
                file_name="a.txt",
                file_type="text/plain",
                file_size=1,
                uploaded_by=Role.CLIENT,
                folder_id=foreign.id,
            )


class TestOrganize:
    async def test_auto_organize_files_each_type_once(self, session, services):
        _, project = await create_client_with_project(session)
        await services.files.setup_default_folders(project.id, Role.DEVELOPER)
        files = [
            unorganized_file(project.id, "image/jpeg", "foto.jpg"),
            unorganized_file(project.id, "application/pdf", "brief.pdf"),
            unorganized_file(project.id, "application/zip", "fuentes.zip"),
        ]
        session.add_all(files)
        await session.commit()

        assert await services.files.auto_organize(project.id) == 3
        assert await services.files.auto_organize(project.id) == 0

        folders = await folders_by_name(services, project.id)
        assert [f.folder_id for f in files] == [
            folders["Images"].id,
            folders["PDFs"].id,
            folders["Other"].id,
        ]

    async def test_manual_root_placement_is_left_alone(self, session, services):
        _, project = await create_client_with_project(session)
        project_file = await services.files.add_file_to_project(
            project.id,
            file_id="uploads/x/foto.jpg",
            file_name="foto.jpg",
            file_type="image/jpeg",
            file_size=10,
            uploaded_by=Role.CLIENT,
        )

        moved = await services.files.move_file_to_folder(project_file.id, None)

        assert moved.folder_id is None
        assert moved.manually_placed
        assert await services.files.auto_organize(project.id) == 0

    async def test_move_to_unknown_folder(self, session, services):
        _, project = await create_client_with_project(session)
        project_file = await services.files.add_file_to_project(
            project.id,
            file_id="uploads/x/foto.jpg",
            file_name="foto.jpg",
            file_type="image/jpeg",
            file_size=10,
            uploaded_by=Role.CLIENT,
        )

        with pytest.raises(NotFoundError):
            await services.files.move_file_to_folder(project_file.id, uuid4())


class TestMessageFiles:
    async def test_file_message_is_catalogued_and_filed(self, session, services):
        _, project = await create_client_with_project(session)
        thread = await create_thread(session, project)

        message = await services.messages.send_file_message(
            thread.id,
            Role.CLIENT,
            file_id="uploads/y/brief.pdf",
            file_name="brief.pdf",
            file_type="application/pdf",
            file_size=500,
            caption="Versión final",
        )

        assert message.content == "📎 brief.pdf\nVersión final"
        assert thread.unread_count_developer == 1
        views = await services.files.list_project_files(project.id)
        assert len(views) == 1
        assert views[0].message.id == message.id
        folders = await folders_by_name(services, project.id)
        assert views[0].file.folder_id == folders["PDFs"].id

    async def test_sync_picks_up_legacy_attachments_once(self, session, services):
        _, project = await create_client_with_project(session)
        thread = await create_thread(session, project)
        session.add(MessageFactory.attachment(thread_id=thread.id))
        await session.commit()

        setup = await services.files.setup_project_file_system(project.id, Role.DEVELOPER)
        assert (setup.folders_created, setup.files_synced, setup.files_organized) == (4, 1, 1)

        again = await services.files.setup_project_file_system(project.id, Role.DEVELOPER)
        assert (again.folders_created, again.files_synced, again.files_organized) == (0, 0, 0)
        assert await services.files.sync_message_files(project.id) == 0


class TestCatalogueReads:
    async def test_search_and_stats(self, session, services):
        _, project = await create_client_with_project(session)
        for name, file_type in (("logo.png", "image/png"), ("brief.pdf", "application/pdf")):
            await services.files.add_file_to_project(
                project.id,
                file_id=f"uploads/z/{name}",
                file_name=name,
                file_type=file_type,
                file_size=100,
                uploaded_by=Role.CLIENT,
            )

        hits = await services.files.search_files(project.id, "logo")
        stats = await services.files.file_stats(project.id)

        assert [h.file.file_name for h in hits] == ["logo.png"]
        assert stats.total_files == 2
        assert stats.total_size == 200
        assert stats.by_type == {"image": 1, "application": 1}
        assert stats.recent_uploads == 2

    async def test_delete_removes_only_the_catalogue_entry(self, session, services):
        _, project = await create_client_with_project(session)
        project_file = await services.files.add_file_to_project(
            project.id,
            file_id="uploads/z/a.txt",
            file_name="a.txt",
            file_type="text/plain",
            file_size=1,
            uploaded_by=Role.CLIENT,
        )

        await services.files.delete_file(project_file.id)

        with pytest.raises(NotFoundError):
            await services.files.get_file(project_file.id)
