from __future__ import annotations

from conftest import bearer
from sqlalchemy.exc import OperationalError


def test_health_is_plain_text(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.text == "Server is running"


def test_healthz_pings_database(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "status": "healthy", "error": None}


def test_request_id_echoed(client):
    r = client.get("/api/health", headers={"X-Request-ID": "rid-123"})
    assert r.headers["x-request-id"] == "rid-123"
    assert client.get("/api/health").headers.get("x-request-id")


def test_error_body_carries_request_id(client):
    r = client.get("/api/od/pending", headers={"X-Request-ID": "rid-9"})
    assert r.status_code == 401
    assert r.json() == {"ok": False, "error": "No token provided", "code": "unauthenticated", "request_id": "rid-9"}


def test_generated_request_id_matches_error_body(client):
    r = client.get("/api/od/pending")
    assert r.status_code == 401
    rid = r.headers["x-request-id"]
    assert rid
    assert r.json()["request_id"] == rid


def test_problem_json_on_request(client):
    r = client.get("/api/od/pending", headers={"Accept": "application/problem+json"})
    assert r.status_code == 401
    assert r.headers["content-type"].startswith("application/problem+json")
    body = r.json()
    assert body["title"] == "Unauthorized"
    assert body["detail"] == "No token provided"
    assert body["instance"] == "/api/od/pending"


def test_store_failure_is_500_with_raw_message(client, monkeypatch):
    from core.repositories import timings as timings_repo

    def _boom(session, year):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(timings_repo, "list_for_year", _boom)
    r = client.get("/api/timings/2", headers=bearer("u1", "u1@college.edu"))
    assert r.status_code == 500
    assert r.json()["code"] == "store_failure"
    assert "connection refused" in r.json()["error"]


def test_meta(client):
    r = client.get("/meta")
    assert r.status_code == 200
    assert r.json()["app_version"] == "dev"
