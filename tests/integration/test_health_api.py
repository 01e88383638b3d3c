"""Tests for the health endpoint."""

from __future__ import annotations

import httpx
import pytest

from scoped_ids.adapters.persistence.database import get_session
from scoped_ids.main import create_app


@pytest.fixture
def app(session):
    app = create_app()

    async def _session_override():
        yield session

    app.dependency_overrides[get_session] = _session_override
    return app


@pytest.mark.asyncio
async def test_health_reports_internal_ids_available(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["schema_version"] == 2
    assert body["internal_ids_available"] is True


@pytest.mark.asyncio
async def test_health_reports_legacy_schema(app, stamp_revision):
    await stamp_revision("001")
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/health")

    body = response.json()
    assert body["schema_version"] == 1
    assert body["required_schema_version"] == 2
    assert body["internal_ids_available"] is False


@pytest.mark.asyncio
async def test_health_degraded_on_non_numeric_revision(app, stamp_revision):
    await stamp_revision("ae1027a6acf")
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert "ae1027a6acf" in body["database"]
    assert body["schema_version"] is None
    assert body["internal_ids_available"] is False
