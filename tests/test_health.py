"""Health endpoint and error envelopes."""
from fastapi.testclient import TestClient
from sqlmodel import select

from giftx.admin.routers import analytics
from giftx.main import app
from giftx.models import ErrorLog


def test_health_returns_ok(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    j = r.json()
    assert j.get("status") == "ok"
    assert j.get("database") == "ok"
    assert j.get("admin_configured") is True


def test_request_id_header(client: TestClient):
    r = client.get("/health")
    assert r.headers.get("X-Request-ID")


def test_unknown_route_uses_error_envelope(client: TestClient):
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    j = r.json()
    assert j["status_code"] == 404
    assert "request_id" in j


def test_unhandled_error_returns_500_and_is_logged(client: TestClient, db, admin_headers: dict, monkeypatch):
    def broken_fetch(db, days):
        raise RuntimeError("visitors table unavailable")

    monkeypatch.setattr(analytics, "fetch_visits", broken_fetch)
    c = TestClient(app, raise_server_exceptions=False)
    r = c.get("/admin/analytics/visitors", headers=admin_headers)
    assert r.status_code == 500
    j = r.json()
    assert j["error"] == "Unexpected server error."
    assert j["status_code"] == 500
    rows = db.exec(select(ErrorLog)).all()
    assert len(rows) == 1
    assert rows[0].endpoint == "/admin/analytics/visitors"
    assert rows[0].method == "GET"
    assert "visitors table unavailable" in rows[0].error_message
