"""MCP Transport: discovery, event stream, and synchronous JSON-RPC on one front door.

Invariants:
    - GET / with Accept: text/event-stream opens the event stream; any other GET / is discovery
    - GET /sse always opens the event stream
    - Event stream's first frame is the `endpoint` event naming settings.message_path
    - POST / and POST {message_path}: one JSON-RPC message in, one reply out
    - Notifications answered 202 with no body
    - Malformed JSON answered 200 with a -32700 envelope, never a bare transport failure
    - CORS headers and pre-flight handled by api/cors.py

Design Decisions:
    - Mode chosen per request from method + Accept header: no per-connection state
    - Raw body read from Request (not a Pydantic body param) so parse errors
      become JSON-RPC errors instead of HTTP 422
    - Message route registered at startup from settings.message_path
      (see register_message_route)
"""

import logging
from collections.abc import Iterable

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse

from septa_mcp.api.dependencies import get_registry, get_rpc_handler
from septa_mcp.api.routes.health import HEALTH_PATH
from septa_mcp.api.routes.stream_helpers import SSE_HEADERS, endpoint_event_stream
from septa_mcp.config import Settings, get_settings
from septa_mcp.services.define_transit_tools import TOOLS_TRANSIT
from septa_mcp.services.jsonrpc_handler import JsonRpcHandler
from septa_mcp.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)
router = APIRouter(tags=["mcp"])

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


def wants_event_stream(request: Request) -> bool:
    return EVENT_STREAM_MEDIA_TYPE in request.headers.get("accept", "")


def upstream_endpoints(base_url: str, definitions: Iterable[dict]) -> dict[str, str]:
    """SEPTA URL template behind each tool, query parameter shown as {name}."""
    endpoints = {}
    for definition in definitions:
        url = f"{base_url}/{definition['path']}"
        query_param = definition.get("query_param")
        if query_param:
            url += f"?{query_param}={{{query_param}}}"
        endpoints[definition["name"]] = url
    return endpoints


def build_discovery(settings: Settings, registry: ToolRegistry) -> dict:
    """Static capability summary for availability probes."""
    definitions = [d for d in TOOLS_TRANSIT if d["name"] in registry]
    return {
        "name": settings.server_name,
        "version": settings.server_version,
        "status": "active",
        "protocol": "MCP JSON-RPC 2.0",
        "tools": registry.names(),
        "endpoints": {
            "discovery": "GET /",
            "health": f"GET {HEALTH_PATH}",
            "sse": "GET /sse",
            "mcp": f"POST {settings.message_path}",
        },
        "apiEndpoints": upstream_endpoints(settings.septa_base_url, definitions),
    }


def _open_event_stream(settings: Settings) -> StreamingResponse:
    logger.info("Opening event stream", extra={"path": settings.message_path})
    return StreamingResponse(
        endpoint_event_stream(
            settings.message_path,
            keepalive_seconds=settings.sse_keepalive_seconds,
            max_duration_seconds=settings.sse_max_duration_seconds,
        ),
        media_type=EVENT_STREAM_MEDIA_TYPE,
        headers=SSE_HEADERS,
    )


@router.get("/")
async def discovery_or_stream(
    request: Request,
    settings: Settings = Depends(get_settings),
    registry: ToolRegistry = Depends(get_registry),
):
    """Discovery JSON, or the event stream when the client asks for one."""
    if wants_event_stream(request):
        return _open_event_stream(settings)
    return build_discovery(settings, registry)


@router.get("/sse")
async def event_stream(settings: Settings = Depends(get_settings)):
    """Server-push channel. First event announces where to POST calls."""
    return _open_event_stream(settings)


async def handle_message(
    request: Request, handler: JsonRpcHandler = Depends(get_rpc_handler),
):
    """Synchronous mode: one JSON-RPC message, one reply."""
    body = await request.body()
    response = await handler.handle_raw(body)
    if response is None:
        return Response(status_code=status.HTTP_202_ACCEPTED)
    return JSONResponse(content=response.to_dict())


router.add_api_route("/", handle_message, methods=["POST"])


def register_message_route(app: FastAPI, message_path: str) -> None:
    """Expose handle_message at the path announced by the endpoint event."""
    if message_path == "/":
        return
    app.add_api_route(
        message_path, handle_message, methods=["POST"], tags=["mcp"],
    )
