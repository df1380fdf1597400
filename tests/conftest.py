"""Root conftest: SEPTA client on a fake upstream, registry/dispatch fixtures, ASGI test client.

Invariants:
    - No test touches the real SEPTA API: every SeptaClient uses httpx.MockTransport
    - client fixture overrides get_dispatch and get_settings; lifespan is not run

Design Decisions:
    - sse_max_duration_seconds set small so event streams terminate under ASGITransport,
      which buffers the whole response before returning
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from septa_mcp.api.dependencies import get_dispatch
from septa_mcp.config import Settings, get_settings
from septa_mcp.infrastructure.septa_client import SeptaClient
from septa_mcp.main import app
from septa_mcp.services.tool_dispatch import ToolDispatch
from septa_mcp.services.tools_registry import build_registry
from tests.fake_septa import SEPTA_BASE, FakeSepta


@pytest.fixture
def fake_septa():
    return FakeSepta()


@pytest.fixture
async def septa_client(fake_septa):
    client = SeptaClient(
        base_url=SEPTA_BASE,
        timeout_seconds=2.0,
        http_fallback=True,
        transport=httpx.MockTransport(fake_septa),
    )
    yield client
    await client.aclose()


@pytest.fixture
def registry(septa_client):
    return build_registry(septa_client)


@pytest.fixture
def dispatch(registry):
    return ToolDispatch(registry)


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        sse_keepalive_seconds=15.0,
        sse_max_duration_seconds=0.05,
    )


@pytest.fixture
async def client(dispatch, test_settings):
    """FastAPI test client with dispatch and settings overridden."""
    app.dependency_overrides[get_dispatch] = lambda: dispatch
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
