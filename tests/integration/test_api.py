"""HTTP tests for the /api endpoints."""

import re

import pytest

from src.core.config import settings


HISTORY_ID_PATTERN = re.compile(r"^h_\d+_[a-z0-9]{5}$")


@pytest.mark.integration
class TestCaretakersApi:
    """Tests for /api/{sync}/caretakers."""

    def test_list_starts_empty(self, client, sync_id):
        response = client.get(f"/api/{sync_id}/caretakers")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_rename_delete(self, client, sync_id):
        """Test the full caretaker lifecycle."""
        created = client.post(f"/api/{sync_id}/caretakers", json={"name": "  Alice  "})
        assert created.status_code == 201
        caretaker = created.json()
        assert caretaker["name"] == "Alice"
        assert caretaker["id"].startswith("c_")

        renamed = client.put(f"/api/{sync_id}/caretakers/{caretaker['id']}", json={"name": "Alicia"})
        assert renamed.status_code == 200
        assert renamed.json() == {"id": caretaker["id"], "name": "Alicia"}

        deleted = client.delete(f"/api/{sync_id}/caretakers/{caretaker['id']}")
        assert deleted.status_code == 204
        assert deleted.content == b""

        assert client.get(f"/api/{sync_id}/caretakers").json() == []

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": 5}, ["Alice"]])
    def test_create_invalid_name(self, client, sync_id, body):
        response = client.post(f"/api/{sync_id}/caretakers", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid name for caretaker"}

    def test_create_with_malformed_json(self, client, sync_id):
        response = client.post(
            f"/api/{sync_id}/caretakers",
            content=b"{name:",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON payload"}

    def test_rename_unknown_caretaker(self, client, sync_id):
        """Test renaming an unknown id is a 404 and changes nothing."""
        client.post(f"/api/{sync_id}/caretakers", json={"name": "Alice"})
        before = client.get(f"/api/{sync_id}/caretakers").json()

        response = client.put(f"/api/{sync_id}/caretakers/c_0_nope0", json={"name": "Mallory"})

        assert response.status_code == 404
        assert response.json() == {"error": "Caretaker not found"}
        assert client.get(f"/api/{sync_id}/caretakers").json() == before

    def test_rename_invalid_name(self, client, sync_id):
        response = client.put(f"/api/{sync_id}/caretakers/c_0_nope0", json={"name": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid new name for caretaker"}

    def test_delete_unknown_caretaker(self, client, sync_id):
        response = client.delete(f"/api/{sync_id}/caretakers/c_0_nope0")

        assert response.status_code == 404
        assert response.json() == {"error": "Caretaker not found"}


@pytest.mark.integration
class TestChoresApi:
    """Tests for /api/{sync}/chores."""

    def test_new_instance_has_default_chore(self, client, sync_id):
        chores = client.get(f"/api/{sync_id}/chores").json()

        assert len(chores) == 1
        assert chores[0]["name"] == "Water the plants"
        assert chores[0]["icon"] == "🪴"

    def test_create_requires_name_and_icon(self, client, sync_id):
        response = client.post(f"/api/{sync_id}/chores", json={"name": "Dishes"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid name or icon for chore"}

    def test_partial_update(self, client, sync_id):
        """Test an update with a valid name and invalid icon only renames."""
        chore = client.post(f"/api/{sync_id}/chores", json={"name": "Dishes", "icon": "🍽️"}).json()

        response = client.put(f"/api/{sync_id}/chores/{chore['id']}", json={"name": "Wash up", "icon": 3})

        assert response.status_code == 200
        assert response.json() == {"id": chore["id"], "name": "Wash up", "icon": "🍽️"}

    def test_update_rejects_when_nothing_valid(self, client, sync_id):
        chore = client.post(f"/api/{sync_id}/chores", json={"name": "Dishes", "icon": "🍽️"}).json()

        response = client.put(f"/api/{sync_id}/chores/{chore['id']}", json={"name": "", "icon": None})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid name or icon for chore"}

    def test_update_unknown_chore(self, client, sync_id):
        response = client.put(f"/api/{sync_id}/chores/chore_0_nope0", json={"name": "X"})

        assert response.status_code == 404
        assert response.json() == {"error": "Chore not found"}

    def test_delete_unknown_chore(self, client, sync_id):
        response = client.delete(f"/api/{sync_id}/chores/chore_0_nope0")

        assert response.status_code == 404
        assert response.json() == {"error": "Chore not found"}


@pytest.mark.integration
class TestTendingAndHistoryApi:
    """Tests for /tend, /history and /last-tended."""

    def test_dishes_scenario(self, client, sync_id):
        """Test create chore, tend it, then delete it leaving an orphaned entry."""
        created = client.post(f"/api/{sync_id}/chores", json={"name": "Dishes", "icon": "🍽️"})
        assert created.status_code == 201
        chore = created.json()
        assert chore["id"] in [c["id"] for c in client.get(f"/api/{sync_id}/chores").json()]

        tended = client.post(f"/api/{sync_id}/tend", json={"tender": "Alice", "choreId": chore["id"]})
        assert tended.status_code == 201
        entry = tended.json()
        assert HISTORY_ID_PATTERN.match(entry["id"])
        assert entry["person"] == "Alice"
        assert entry["chore_id"] == chore["id"]
        assert entry["notes"] is None

        last = client.get(f"/api/{sync_id}/last-tended").json()
        assert last == {"lastTended": entry["timestamp"], "lastTender": "Alice"}

        assert client.delete(f"/api/{sync_id}/chores/{chore['id']}").status_code == 204

        history = client.get(f"/api/{sync_id}/history").json()
        assert [e["id"] for e in history] == [entry["id"]]
        lookup = client.get(f"/api/{sync_id}/chores/{history[0]['chore_id']}")
        assert lookup.status_code == 404
        assert lookup.json() == {"error": "Chore not found"}

    def test_tend_accepts_caretaker_field_and_notes(self, client, sync_id):
        response = client.post(
            f"/api/{sync_id}/tend",
            json={"caretaker": "Bob", "choreId": "chore_1_aaaaa", "notes": " misted too "},
        )

        assert response.status_code == 201
        assert response.json()["person"] == "Bob"
        assert response.json()["notes"] == "misted too"

    @pytest.mark.parametrize("body", [{"choreId": "chore_1"}, {"tender": "Alice"}, {"tender": 1, "choreId": "x"}])
    def test_tend_invalid_body(self, client, sync_id, body):
        response = client.post(f"/api/{sync_id}/tend", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid tender or chore identifier"}

    def test_history_sorted_and_delete_recomputes(self, client, sync_id):
        """Test history ordering and cache recompute after deleting the newest entry."""
        first = client.post(f"/api/{sync_id}/tend", json={"tender": "Alice", "choreId": "chore_a"}).json()
        second = client.post(f"/api/{sync_id}/tend", json={"tender": "Bob", "choreId": "chore_b"}).json()

        history = client.get(f"/api/{sync_id}/history").json()
        timestamps = [e["timestamp"] for e in history]
        assert timestamps == sorted(timestamps, reverse=True)

        newest, older = (second, first) if second["timestamp"] >= first["timestamp"] else (first, second)
        assert client.delete(f"/api/{sync_id}/history/{newest['id']}").status_code == 204
        last = client.get(f"/api/{sync_id}/last-tended").json()
        assert last == {"lastTended": older["timestamp"], "lastTender": older["person"]}

        assert client.delete(f"/api/{sync_id}/history/{older['id']}").status_code == 204
        assert client.get(f"/api/{sync_id}/last-tended").json() == {"lastTended": None, "lastTender": None}

    def test_delete_unknown_history_entry(self, client, sync_id):
        response = client.delete(f"/api/{sync_id}/history/h_0_nope0")

        assert response.status_code == 404
        assert response.json() == {"error": "History entry not found"}


@pytest.mark.integration
class TestRouting:
    """Tests for unmatched routes, path normalization and app version."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/s/unknown"),
            ("POST", "/api/s/history"),
            ("PUT", "/api/s/history/h_1"),
            ("GET", "/api/s/tend"),
            ("POST", "/api/s/last-tended"),
            ("PATCH", "/api/s/chores/chore_1"),
            ("DELETE", "/api/s/chores"),
            ("GET", "/api/s/chores/chore_1/extra"),
        ],
    )
    def test_unmatched_api_routes(self, client, method, path):
        response = client.request(method, path)

        assert response.status_code == 404
        assert response.json() == {"error": "API endpoint not found or method not allowed."}

    def test_empty_segments_are_ignored(self, client, sync_id):
        client.post(f"/api/{sync_id}/caretakers", json={"name": "Alice"})

        response = client.get(f"/api//{sync_id}//caretakers/")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Alice"]

    def test_app_version(self, client):
        response = client.get("/api/app-version")

        assert response.status_code == 200
        assert response.json() == {"version": settings.app_version}

    def test_app_version_under_sync_code(self, client, sync_id):
        assert client.get(f"/api/{sync_id}/app-version").json() == {"version": settings.app_version}

    def test_sync_codes_are_isolated(self, client):
        client.post("/api/house-a/caretakers", json={"name": "Alice"})

        assert client.get("/api/house-b/caretakers").json() == []
