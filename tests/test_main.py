import logging

import httpx
import pytest

import main
import app.deps as deps
from app.routes import analytics as analytics_routes

from conftest import ADMIN, fake_decode_token


@pytest.fixture
async def raw_client(mock_db, use_db, monkeypatch):
    """Client that receives the 500 response instead of the re-raised exception"""
    use_db(mock_db)
    monkeypatch.setattr(deps, "AUTH_DISABLED", False)
    monkeypatch.setattr(deps, "decode_token", fake_decode_token)

    transport = httpx.ASGITransport(app=main.app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def test_health(client):
    resp = await client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_successful_request_is_logged(client, caplog):
    caplog.set_level(logging.INFO, logger="homeworkhelper")

    await client.get("/health")

    assert any("GET /health -> 200" in r.getMessage() for r in caplog.records)


async def test_failed_request_is_logged_as_500(raw_client, monkeypatch, caplog):
    async def broken_dashboard(db, filters):
        raise RuntimeError("aggregation bug")

    monkeypatch.setattr(analytics_routes, "get_system_dashboard", broken_dashboard)
    caplog.set_level(logging.INFO, logger="homeworkhelper")

    resp = await raw_client.get("/api/analytics/system-dashboard", headers=ADMIN)

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
    assert any(
        "GET /api/analytics/system-dashboard -> 500" in r.getMessage() for r in caplog.records
    )
