"""Error Handlers: domain and catch-all errors become structured JSON."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from septa_mcp.api.error_handlers import register_error_handlers
from septa_mcp.main import app


@pytest.fixture
async def unstarted_client():
    """Real app with no dependency overrides and no lifespan: no dispatcher on app.state."""
    app.dependency_overrides.clear()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac


async def test_call_before_startup_returns_service_not_ready(unstarted_client):
    res = await unstarted_client.post("/message", json={
        "jsonrpc": "2.0", "id": 1, "method": "tools/list",
    })
    assert res.status_code == 503
    body = res.json()["error"]
    assert body["code"] == "SERVICE_NOT_READY"
    assert body["category"] == "configuration"


async def test_discovery_before_startup_returns_service_not_ready(unstarted_client):
    res = await unstarted_client.get("/")
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "SERVICE_NOT_READY"


async def test_unhandled_error_does_not_leak_details():
    bare = FastAPI()
    register_error_handlers(bare)

    @bare.get("/boom")
    async def raise_generic():
        raise RuntimeError("secret detail")

    transport = ASGITransport(app=bare, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        res = await ac.get("/boom")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "secret detail" not in res.text
