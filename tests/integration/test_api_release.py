"""Integration tests for the feedback and changelog endpoints."""

import pytest
from httpx import AsyncClient

from src.projecthub.models import FeedbackStatus
from tests.factories import FeedbackFactory

pytestmark = pytest.mark.integration


class TestFeedbackApi:
    async def test_submit_triage_and_release(self, client: AsyncClient):
        created = await client.post(
            "/api/v1/feedback",
            json={
                "category": "change_request",
                "subject": "  Cambiar el teléfono  ",
                "description": "El número nuevo es 555-0101.",
            },
        )
        feedback_id = created.json()["id"]

        triaged = await client.post(
            f"/api/v1/feedback/{feedback_id}/status",
            json={"status": "completed", "developer_notes": "Actualizado en el pie"},
        )
        released = await client.post("/api/v1/feedback/release")
        listed = await client.get("/api/v1/feedback", params={"status": "released"})

        assert created.status_code == 201
        assert created.json()["subject"] == "Cambiar el teléfono"
        assert created.json()["status"] == "new"
        assert created.json()["priority"] == "medium"
        assert triaged.json()["developer_notes"] == "Actualizado en el pie"
        assert released.json() == {"released": 1}
        assert [f["id"] for f in listed.json()] == [feedback_id]

    async def test_unknown_category_is_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/feedback",
            json={"category": "praise", "subject": "Genial", "description": "Todo bien"},
        )

        assert response.status_code == 422

    async def test_status_of_unknown_feedback(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/feedback/00000000-0000-0000-0000-000000000000/status",
            json={"status": "in_progress"},
        )

        assert response.status_code == 404
        assert response.json()["request_id"]

    async def test_list_shows_seeded_feedback(self, client: AsyncClient, session):
        session.add(FeedbackFactory.build(status=FeedbackStatus.IN_PROGRESS.value))
        await session.commit()

        response = await client.get("/api/v1/feedback")

        assert [f["status"] for f in response.json()] == ["in_progress"]


class TestChangelogApi:
    async def test_publish_and_read_back(self, client: AsyncClient):
        body = {
            "version": "2.0.0",
            "english_content": {"features": ["Shared folders", " "]},
            "spanish_content": {"features": ["Carpetas compartidas"]},
            "release_notes_es": "Llegan las carpetas.",
        }

        created = await client.post("/api/v1/changelog", json=body)
        fetched = await client.get("/api/v1/changelog/2.0.0")
        listed = await client.get("/api/v1/changelog")

        assert created.status_code == 201
        assert created.json()["english_content"] == {
            "features": ["Shared folders"],
            "bugfixes": None,
            "improvements": None,
        }
        assert fetched.json()["release_notes_es"] == "Llegan las carpetas."
        assert [e["version"] for e in listed.json()] == ["2.0.0"]

    async def test_duplicate_version(self, client: AsyncClient):
        body = {"version": "2.0.0", "english_content": {}, "spanish_content": {}}

        await client.post("/api/v1/changelog", json=body)
        response = await client.post("/api/v1/changelog", json=body)

        assert response.status_code == 409
        assert "2.0.0" in response.json()["detail"]

    async def test_unknown_version(self, client: AsyncClient):
        response = await client.get("/api/v1/changelog/0.0.1")

        assert response.status_code == 404
