"""Route Dependencies: read-only access to the process-wide registry and dispatcher.

Invariants:
    - Registry and dispatcher are built in the lifespan and stored on app.state
    - Routes never construct them: tests swap them via app.dependency_overrides
    - A request served before the lifespan ran raises ServiceNotReadyError (503)
"""

from fastapi import Depends, Request

from septa_mcp.config import Settings, get_settings
from septa_mcp.core.errors import ServiceNotReadyError
from septa_mcp.services.jsonrpc_handler import JsonRpcHandler
from septa_mcp.services.tool_dispatch import ToolDispatch
from septa_mcp.services.tools_registry import ToolRegistry


def get_dispatch(request: Request) -> ToolDispatch:
    dispatch = getattr(request.app.state, "dispatch", None)
    if dispatch is None:
        raise ServiceNotReadyError()
    return dispatch


def get_registry(dispatch: ToolDispatch = Depends(get_dispatch)) -> ToolRegistry:
    return dispatch.registry


def get_rpc_handler(
    dispatch: ToolDispatch = Depends(get_dispatch),
    settings: Settings = Depends(get_settings),
) -> JsonRpcHandler:
    return JsonRpcHandler(dispatch, settings)
