"""SEPTA Transit MCP: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery: ExMA anti-pattern)
    - Tool registry fully built and frozen in the lifespan before the app serves traffic;
      a DuplicateToolError aborts startup
    - One pooled SeptaClient per process, closed on shutdown
    - CORS allow-all applied to every response, pre-flight answered with headers only
      (api/cors.py)

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Registry and dispatcher stored on app.state, read through api/dependencies.py
    - Run with: uvicorn septa_mcp.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from septa_mcp.api.cors import register_cors
from septa_mcp.api.error_handlers import register_error_handlers
from septa_mcp.api.routes import health, mcp_transport
from septa_mcp.config import get_settings
from septa_mcp.infrastructure.observability import setup_logging
from septa_mcp.infrastructure.septa_client import SeptaClient
from septa_mcp.services.tool_dispatch import ToolDispatch
from septa_mcp.services.tools_registry import build_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    client = SeptaClient(
        base_url=settings.septa_base_url,
        timeout_seconds=settings.upstream_timeout_seconds,
        http_fallback=settings.upstream_http_fallback,
    )
    try:
        registry = build_registry(client)
        app.state.dispatch = ToolDispatch(registry)
        logger.info(
            "%s %s started with tools: %s",
            settings.server_name, settings.server_version,
            ", ".join(registry.names()),
        )
        yield
    finally:
        await client.aclose()
        logger.info("%s shutting down", settings.server_name)


settings = get_settings()

app = FastAPI(
    title=settings.server_name, version=settings.server_version, lifespan=lifespan,
)

register_cors(app, settings.cors_origins)

app.include_router(health.router)
app.include_router(mcp_transport.router)
mcp_transport.register_message_route(app, settings.message_path)

register_error_handlers(app)
