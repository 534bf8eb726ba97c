"""Pad listing, bootstrap and the save endpoint."""

from sqlalchemy.exc import OperationalError

from padsync.auth.utils import create_nonce
from padsync.deps import get_documents
from padsync.main import app


def bootstrap(client, key="scratchpad"):
    response = client.get(f"/api/pads/{key}")
    assert response.status_code == 200
    return response.json()


def beat(client, **fields):
    return client.post("/api/heartbeat", json=fields).json()


class TestListAndBootstrap:
    def test_list_configured_pads(self, alice_client):
        response = alice_client.get("/api/pads")
        assert response.status_code == 200
        assert response.json() == [
            {"key": "scratchpad", "title": "Scratchpad"},
            {"key": "agenda", "title": "Agenda Scratchpad"},
        ]

    def test_bootstrap_returns_settings_for_client(self, alice_client, users):
        data = bootstrap(alice_client)
        assert data["key"] == "scratchpad"
        assert data["content"] == ""
        assert data["user_id"] == users["alice"].id
        assert data["heartbeat_interval"] == 15
        assert data["nonce"]

    def test_unknown_pad_is_404(self, alice_client):
        assert alice_client.get("/api/pads/tracklist").status_code == 404
        response = alice_client.post("/api/pads/tracklist/save", json={"nonce": "x", "content": "y"})
        assert response.status_code == 404

    def test_list_requires_auth(self, client_for, users):
        assert client_for(None).get("/api/pads").status_code == 401


class TestSave:
    def test_save_then_read_back(self, alice_client):
        nonce = bootstrap(alice_client)["nonce"]
        response = alice_client.post(
            "/api/pads/scratchpad/save", json={"nonce": nonce, "content": "<p>Guest: Sam</p>"}
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Saved!"}
        assert bootstrap(alice_client)["content"] == "<p>Guest: Sam</p>"

    def test_saved_content_is_sanitized(self, alice_client):
        nonce = bootstrap(alice_client)["nonce"]
        alice_client.post(
            "/api/pads/scratchpad/save",
            json={"nonce": nonce, "content": 'hi<script>alert(1)</script><a href="javascript:x">y</a>'},
        )
        assert bootstrap(alice_client)["content"] == "hi<a>y</a>"

    def test_locked_by_other_is_rejected(self, alice_client, bob_client):
        bob_nonce = bootstrap(bob_client)["nonce"]
        alice_nonce = bootstrap(alice_client)["nonce"]
        alice_client.post(
            "/api/pads/scratchpad/save", json={"nonce": alice_nonce, "content": "kept"}
        )
        beat(alice_client, scratchpad_check=True, scratchpad_is_editing=True)

        response = bob_client.post(
            "/api/pads/scratchpad/save", json={"nonce": bob_nonce, "content": "lost"}
        )
        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "Locked by another user."}
        assert bootstrap(alice_client)["content"] == "kept"

    def test_holder_can_save_while_locked(self, alice_client, bob_client):
        nonce = bootstrap(alice_client)["nonce"]
        beat(alice_client, scratchpad_check=True, scratchpad_is_editing=True)
        response = alice_client.post(
            "/api/pads/scratchpad/save", json={"nonce": nonce, "content": "mine"}
        )
        assert response.json()["success"] is True

    def test_missing_nonce_is_forbidden(self, alice_client):
        response = alice_client.post("/api/pads/scratchpad/save", json={"content": "x"})
        assert response.status_code == 403
        assert response.json()["detail"] == "Invalid nonce"

    def test_nonce_of_another_user_is_forbidden(self, alice_client, bob_client):
        bob_nonce = bootstrap(bob_client)["nonce"]
        response = alice_client.post(
            "/api/pads/scratchpad/save", json={"nonce": bob_nonce, "content": "x"}
        )
        assert response.status_code == 403

    def test_nonce_is_bound_to_pad(self, alice_client, users):
        agenda_nonce = create_nonce(users["alice"].id, "agenda_save")
        response = alice_client.post(
            "/api/pads/scratchpad/save", json={"nonce": agenda_nonce, "content": "x"}
        )
        assert response.status_code == 403

    def test_missing_content_is_422(self, alice_client):
        nonce = bootstrap(alice_client)["nonce"]
        response = alice_client.post("/api/pads/scratchpad/save", json={"nonce": nonce})
        assert response.status_code == 422

    def test_save_requires_auth(self, client_for, users):
        response = client_for(None).post(
            "/api/pads/scratchpad/save", json={"nonce": "x", "content": "y"}
        )
        assert response.status_code == 401


class BrokenDocuments:
    def get(self, key):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def put(self, key, content, user_id=None):
        raise OperationalError("UPDATE", {}, Exception("database is locked"))


def test_storage_failure_degrades_to_request_failed(alice_client):
    app.dependency_overrides[get_documents] = lambda: BrokenDocuments()
    response = alice_client.get("/api/pads/scratchpad")
    assert response.status_code == 503
    assert response.json() == {"success": False, "message": "Request failed"}
