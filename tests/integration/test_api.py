"""Integration tests for the HTTP API."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from src.projecthub.models import Role
from tests.helpers import RecordingDispatcher, create_client_with_project, create_thread

pytestmark = pytest.mark.integration


async def create_thread_via_api(client: AsyncClient, project_id, **payload) -> dict:
    body = {"project_id": str(project_id), "title": "Colores del logo", "created_by": "client"}
    body.update(payload)
    response = await client.post("/api/v1/threads", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestClientsApi:
    async def test_create_then_conflict(self, client: AsyncClient):
        payload = {"name": "Agua Limpia", "email": "hola@agua.mx"}

        created = await client.post("/api/v1/clients", json=payload)
        duplicate = await client.post("/api/v1/clients", json=payload)

        assert created.status_code == 201
        assert created.json()["language"] == "es"
        assert duplicate.status_code == 409
        assert "already exists" in duplicate.json()["detail"]

    async def test_invalid_email_is_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/clients", json={"name": "Agua Limpia", "email": "no-es-email"}
        )
        assert response.status_code == 422

    async def test_unknown_client_carries_request_id(self, client: AsyncClient):
        response = await client.get(f"/api/v1/clients/{uuid4()}")

        assert response.status_code == 404
        data = response.json()
        assert "not found" in data["detail"]
        assert data["request_id"]
        assert response.headers["X-Request-ID"] == data["request_id"]


class TestProjectsApi:
    async def test_create_project_and_list_for_client(self, client: AsyncClient):
        created = await client.post("/api/v1/clients", json={"name": "Panadería Sol"})
        client_id = created.json()["id"]

        response = await client.post(
            "/api/v1/projects",
            json={"client_id": client_id, "name": "Tienda en línea", "type": "website"},
        )
        assert response.status_code == 201
        assert response.json()["status"] == "not_started"

        listed = await client.get(f"/api/v1/clients/{client_id}/projects")
        assert [p["name"] for p in listed.json()] == ["Tienda en línea"]

    async def test_status_note_reaches_the_client(self, client: AsyncClient, session):
        _, project = await create_client_with_project(session)

        response = await client.post(
            f"/api/v1/projects/{project.id}/status",
            json={"status": "review", "note": "Lista para revisar"},
        )
        assert response.status_code == 200

        threads = await client.get(f"/api/v1/projects/{project.id}/threads?viewer=client")
        [summary] = threads.json()
        assert summary["unread_count"] == 1
        assert summary["last_message"]["message_type"] == "status_update"

    async def test_delete_reports_counts(self, client: AsyncClient, session):
        _, project = await create_client_with_project(session)
        await create_thread(session, project)

        response = await client.delete(f"/api/v1/projects/{project.id}")

        assert response.status_code == 200
        assert response.json()["deleted_threads"] == 1
        assert (await client.get(f"/api/v1/projects/{project.id}")).status_code == 404


class TestThreadsApi:
    async def test_conversation_round(
        self, client: AsyncClient, session, dispatcher: RecordingDispatcher
    ):
        _, project = await create_client_with_project(session)
        thread = await create_thread_via_api(client, project.id, initial_message="¿Azul o verde?")
        thread_id = thread["id"]
        assert thread["unread_count_developer"] == 1

        unread = await client.get("/api/v1/threads/unread-count", params={"viewer": "developer"})
        assert unread.json() == {"viewer": "developer", "unread_count": 1}
        assert len(dispatcher.scheduled) == 1

        reply = await client.post(
            f"/api/v1/threads/{thread_id}/messages",
            json={"author": "developer", "content": "Verde, como el logo"},
        )
        assert reply.status_code == 201
        assert reply.json()["author"] == "developer"

        await client.post(f"/api/v1/threads/{thread_id}/read", json={"reader": "client"})
        unread = await client.get("/api/v1/threads/unread-count", params={"viewer": "client"})
        assert unread.json()["unread_count"] == 0

        messages = await client.get(f"/api/v1/threads/{thread_id}/messages")
        assert [m["author"] for m in messages.json()] == ["client", "developer"]

    async def test_private_note_is_hidden_unless_asked_for(self, client: AsyncClient, session):
        _, project = await create_client_with_project(session)
        thread = await create_thread(session, project)

        response = await client.post(
            f"/api/v1/threads/{thread.id}/notes", json={"note": "Pedir pago"}
        )
        assert response.status_code == 201

        visible = await client.get(f"/api/v1/threads/{thread.id}/messages")
        everything = await client.get(
            f"/api/v1/threads/{thread.id}/messages", params={"include_private": "true"}
        )
        assert visible.json() == []
        assert len(everything.json()) == 1

        await session.refresh(thread)
        assert (thread.unread_count_client, thread.unread_count_developer) == (0, 0)

    async def test_blank_message_is_rejected(self, client: AsyncClient, session):
        _, project = await create_client_with_project(session)
        thread = await create_thread(session, project)

        response = await client.post(
            f"/api/v1/threads/{thread.id}/messages",
            json={"author": Role.CLIENT.value, "content": "   "},
        )

        assert response.status_code == 422

    async def test_unknown_thread(self, client: AsyncClient):
        response = await client.post(
            f"/api/v1/threads/{uuid4()}/messages",
            json={"author": "client", "content": "Hola"},
        )
        assert response.status_code == 404
        assert response.json()["request_id"]

    async def test_delete_thread(self, client: AsyncClient, session):
        _, project = await create_client_with_project(session)
        thread = await create_thread(session, project)

        response = await client.delete(f"/api/v1/threads/{thread.id}")

        assert response.status_code == 204
        assert (await client.get(f"/api/v1/threads/{thread.id}")).status_code == 404
