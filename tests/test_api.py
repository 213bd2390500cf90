"""
HTTP API tests

Runs the full application (middleware, routes, exception handlers) over
FastAPI's TestClient against the in-memory sheet.
"""

import pytest
from fastapi.testclient import TestClient

from config import config
from conftest import vote_row
from server.main import create_app
from server.routes.vote import DUPLICATE_MESSAGE, INVALID_CONTESTANT_MESSAGE, SUBMIT_FAILED_MESSAGE

ADMIN_PASSWORD = "hunter2"


@pytest.fixture
def client(store, monkeypatch):
    monkeypatch.setattr(config, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    return {"Authorization": f"Bearer {response.json()['token']}"}


class TestPublic:
    """Endpoints that need no credentials"""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "OK"
        assert "X-Request-ID" in response.headers

    def test_request_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"

    def test_unusable_request_id_replaced(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "has spaces in it"})
        assert response.headers["X-Request-ID"] != "has spaces in it"

    def test_root_info(self, client):
        assert client.get("/").json()["status"] == "running"

    def test_contestants_lists_active_only(self, client):
        body = client.get("/api/contestants").json()

        assert body["success"] is True
        assert [c["id"] for c in body["contestants"]] == [1, 2]
        assert body["contestants"][0]["imageUrl"] == "alice.jpg"

    def test_results(self, client, sheets):
        sheets.tabs["Votes"].append(vote_row("a@b.co", "09170000000", 2))

        body = client.get("/api/results").json()

        assert body["success"] is True
        assert body["totalVotes"] == 1
        assert [r["votes"] for r in body["results"]] == [0, 1]

    def test_store_failure_is_generic_500(self, client, sheets):
        sheets.fail_operations.add("read")

        response = client.get("/api/contestants")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error loading contestants"}

    def test_metrics(self, client):
        client.get("/api/health")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "voting_api_requests_total" in response.text


class TestVote:
    """POST /api/vote"""

    def test_accepted(self, client, sheets, valid_payload):
        response = client.post("/api/vote", json=valid_payload)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Vote submitted successfully"}
        row = sheets.appends[0][2]
        assert row[2] == "jane.cruz@example.com"
        assert row[7] == "testclient"

    def test_forwarded_ip_recorded(self, client, sheets, valid_payload):
        client.post("/api/vote", json=valid_payload, headers={"X-Forwarded-For": "198.51.100.4, 10.0.0.1"})
        assert sheets.appends[0][2][7] == "198.51.100.4"

    def test_missing_field(self, client, sheets, valid_payload):
        del valid_payload["email"]

        response = client.post("/api/vote", json=valid_payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "All fields are required"}
        assert sheets.reads == []

    def test_numeric_json_fields(self, client, sheets, valid_payload):
        valid_payload["contestantId"] = 1
        valid_payload["gradeLevel"] = 10

        assert client.post("/api/vote", json=valid_payload).status_code == 200

    def test_bad_mobile(self, client, sheets, valid_payload):
        valid_payload["mobile"] = "08171234567"

        response = client.post("/api/vote", json=valid_payload)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid mobile number. Must be 11 digits starting with 09"
        assert sheets.reads == []

    def test_duplicate(self, client, valid_payload):
        assert client.post("/api/vote", json=valid_payload).status_code == 200

        valid_payload["email"] = "other@example.com"
        response = client.post("/api/vote", json=valid_payload)

        assert response.status_code == 400
        assert response.json()["message"] == DUPLICATE_MESSAGE

    def test_inactive_contestant(self, client, valid_payload):
        valid_payload["contestantId"] = "3"

        response = client.post("/api/vote", json=valid_payload)

        assert response.status_code == 400
        assert response.json()["message"] == INVALID_CONTESTANT_MESSAGE

    def test_store_failure(self, client, sheets, valid_payload):
        sheets.fail_operations.add("append")

        response = client.post("/api/vote", json=valid_payload)

        assert response.status_code == 500
        assert response.json()["message"] == SUBMIT_FAILED_MESSAGE

    def test_non_object_body(self, client):
        response = client.post("/api/vote", json=["not", "an", "object"])
        assert response.status_code == 400
        assert response.json()["success"] is False


class TestAdminAuth:
    """Login and bearer token enforcement"""

    def test_login(self, client):
        response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})

        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Login successful"
        assert body["token"]

    def test_wrong_password(self, client):
        response = client.post("/api/admin/login", json={"password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid password"}

    def test_login_disabled_without_password(self, client, monkeypatch):
        monkeypatch.setattr(config, "ADMIN_PASSWORD", "")

        response = client.post("/api/admin/login", json={"password": ""})

        assert response.status_code == 500
        assert response.json()["message"] == "Admin authentication not configured"

    def test_missing_token(self, client):
        response = client.get("/api/admin/overview")

        assert response.status_code == 401
        assert response.json()["message"] == "No authorization token provided"

    def test_invalid_token(self, client):
        response = client.get("/api/admin/overview", headers={"Authorization": "Bearer forged"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_token_from_other_app_rejected(self, store, client, monkeypatch):
        monkeypatch.setattr(config, "ADMIN_TOKEN_SECRET", "")
        with TestClient(create_app(store=store)) as other:
            token = other.post("/api/admin/login", json={"password": ADMIN_PASSWORD}).json()["token"]

        response = client.get("/api/admin/overview", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestAdminContestants:
    """Roster management"""

    def test_overview(self, client, sheets, admin_headers):
        sheets.tabs["Votes"].append(vote_row("a@b.co", "09170000000", 1))

        body = client.get("/api/admin/overview", headers=admin_headers).json()

        assert body["totalVotes"] == 1
        assert body["totalContestants"] == 3
        assert body["activeContestants"] == 2

    def test_list_includes_inactive(self, client, admin_headers):
        body = client.get("/api/admin/contestants", headers=admin_headers).json()
        assert [c["active"] for c in body["contestants"]] == [True, True, False]

    def test_add(self, client, admin_headers):
        response = client.post(
            "/api/admin/contestants",
            json={"name": "Dana Lim", "description": "Pianist", "imageUrl": "dana.png"},
            headers=admin_headers,
        )

        body = response.json()
        assert body["message"] == "Contestant added successfully"
        assert body["contestant"] == {
            "id": 4, "name": "Dana Lim", "description": "Pianist", "active": True, "imageUrl": "dana.png",
        }
        assert [c["id"] for c in client.get("/api/contestants").json()["contestants"]] == [1, 2, 4]

    def test_add_without_name(self, client, admin_headers):
        response = client.post("/api/admin/contestants", json={"description": "x"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Contestant name is required"

    def test_update(self, client, sheets, admin_headers):
        response = client.put(
            "/api/admin/contestants/3",
            json={"name": "Carla Diaz", "description": "Poet", "active": True},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["contestant"]["active"] is True
        assert sheets.updates[-1][1] == "A4:E4"

    def test_update_unknown(self, client, admin_headers):
        response = client.put("/api/admin/contestants/42", json={"name": "X"}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Contestant not found"

    def test_delete_is_soft(self, client, sheets, admin_headers):
        sheets.tabs["Votes"].append(vote_row("a@b.co", "09170000000", 1))

        response = client.delete("/api/admin/contestants/1", headers=admin_headers)

        assert response.json()["message"] == "Contestant deleted successfully"
        assert [c["id"] for c in client.get("/api/contestants").json()["contestants"]] == [2]
        voters = client.get("/api/admin/voters", headers=admin_headers).json()
        assert voters["voters"][0]["contestantName"] == "Alice Santos"

    def test_voters(self, client, sheets, admin_headers):
        sheets.tabs["Votes"].append(vote_row("a@b.co", "09170000000", 42))

        body = client.get("/api/admin/voters", headers=admin_headers).json()

        assert body["total"] == 1
        assert body["voters"][0]["contestantName"] == "Unknown"


class TestRateLimiting:
    def test_limit_applies_to_api_routes(self, store, monkeypatch):
        monkeypatch.setattr(config, "RATE_LIMIT_REQUESTS", 2)

        with TestClient(create_app(store=store)) as client:
            assert client.get("/api/contestants").status_code == 200
            assert client.get("/api/contestants").status_code == 200
            blocked = client.get("/api/contestants")

            assert blocked.status_code == 429
            assert blocked.json()["success"] is False
            assert "Retry-After" in blocked.headers
            assert client.get("/api/health").status_code == 200
