"""Tests for the HTTP API."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from fittrack.db import DocumentStore, init_db
from fittrack.services import import_program_tree
from fittrack.web import create_app

from .conftest import OTHER_USER_ID, USER_ID, make_program_data

pytestmark = pytest.mark.integration


@pytest.fixture
def seeded(temp_db_path):
    """Database holding one program; returns (db path, program id, week id)."""

    async def _seed():
        await init_db(temp_db_path)
        store = DocumentStore(temp_db_path)
        program_id, _ = await import_program_tree(
            store, USER_ID, make_program_data(workouts=2, exercises=2, sets=3)
        )
        weeks = await store.list_collection(f"users/{USER_ID}/programs/{program_id}/weeks")
        return program_id, weeks[0].id

    program_id, week_id = asyncio.run(_seed())
    return temp_db_path, program_id, week_id


@pytest.fixture
def client(seeded):
    db_path, _, _ = seeded
    with TestClient(create_app(db_path)) as test_client:
        yield test_client


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestDuplicateWeek:
    """Tests for POST /functions/duplicateWeek."""

    def test_success(self, client, seeded):
        _, program_id, week_id = seeded

        response = client.post(
            "/functions/duplicateWeek",
            json={"programId": program_id, "weekId": week_id},
            headers={"X-User-Id": USER_ID},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        mapping = body["mapping"]
        assert mapping["oldWeekId"] == week_id
        assert mapping["newWeekName"] == "Week 1 Copy 1"
        assert len(mapping["workouts"]) == 2
        assert len(mapping["workouts"][0]["exercises"][0]["sets"]) == 3

    def test_unauthenticated(self, client, seeded):
        _, program_id, week_id = seeded

        response = client.post(
            "/functions/duplicateWeek", json={"programId": program_id, "weekId": week_id}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "unauthenticated"

    def test_missing_week_id(self, client, seeded):
        _, program_id, _ = seeded

        response = client.post(
            "/functions/duplicateWeek",
            json={"programId": program_id},
            headers={"X-User-Id": USER_ID},
        )

        assert response.status_code == 400
        assert response.json()["error"] == {
            "code": "invalid-argument",
            "message": "programId and weekId are required.",
        }

    def test_missing_body(self, client):
        response = client.post("/functions/duplicateWeek", headers={"X-User-Id": USER_ID})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "invalid-argument"
        assert error["message"].startswith("Invalid request:")

    def test_wrongly_typed_ids(self, client, seeded):
        _, _, week_id = seeded

        response = client.post(
            "/functions/duplicateWeek",
            json={"programId": 5, "weekId": week_id},
            headers={"X-User-Id": USER_ID},
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "invalid-argument"
        assert "programId" in error["message"]

    def test_unknown_week(self, client, seeded):
        _, program_id, _ = seeded

        response = client.post(
            "/functions/duplicateWeek",
            json={"programId": program_id, "weekId": "missing"},
            headers={"X-User-Id": USER_ID},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not-found"

    def test_unexpected_error(self, client, seeded, monkeypatch):
        _, program_id, week_id = seeded

        async def broken(*args, **kwargs):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(client.app.state.cascade, "duplicate_week", broken)
        response = client.post(
            "/functions/duplicateWeek",
            json={"programId": program_id, "weekId": week_id},
            headers={"X-User-Id": USER_ID},
        )

        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "internal",
            "message": "Duplication failed. See logs for details.",
        }


class TestCascadeDeleteRoutes:
    """Tests for the delete and delete-preview routes."""

    def test_preview(self, client, seeded):
        _, program_id, week_id = seeded

        response = client.get(
            f"/users/{USER_ID}/programs/{program_id}/weeks/{week_id}/delete-preview",
            headers={"X-User-Id": USER_ID},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["level"] == "week"
        assert body["counts"]["totalItems"] == 2 + 4 + 12
        assert body["summary"] == "2 workouts, 4 exercises, 12 sets"

    def test_delete_program(self, client, seeded):
        _, program_id, _ = seeded

        response = client.delete(
            f"/users/{USER_ID}/programs/{program_id}", headers={"X-User-Id": USER_ID}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["level"] == "program"
        assert body["deleted"]["weeks"] == 1

        again = client.delete(
            f"/users/{USER_ID}/programs/{program_id}", headers={"X-User-Id": USER_ID}
        )
        assert again.status_code == 404

    def test_other_user_forbidden(self, client, seeded):
        _, program_id, week_id = seeded

        response = client.delete(
            f"/users/{USER_ID}/programs/{program_id}/weeks/{week_id}",
            headers={"X-User-Id": OTHER_USER_ID},
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "permission-denied"

        preview = client.get(
            f"/users/{USER_ID}/programs/{program_id}/weeks/{week_id}/delete-preview",
            headers={"X-User-Id": USER_ID},
        )
        assert preview.json()["counts"]["totalItems"] == 18

    def test_bad_path(self, client):
        response = client.delete(f"/users/{USER_ID}/weeks/w1", headers={"X-User-Id": USER_ID})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid-argument"
