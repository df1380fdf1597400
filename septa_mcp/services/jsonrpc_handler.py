"""JSON-RPC Handler: maps one MCP JSON-RPC 2.0 message onto ToolDispatch.

Invariants:
    - Every request (message with an id) gets exactly one JsonRpcResponse
    - Notifications (no id) get None: the transport replies 202 with no body
    - jsonrpc != "2.0" -> -32600; unknown method -> -32601; bad JSON -> -32700
    - tools/call errors carry data.kind (ToolNotFound / InvalidArguments / UpstreamFailure)
    - Unexpected exceptions -> -32603, logged with trace, message never leaks internals

Design Decisions:
    - Explicit method table over getattr: every method visible in one place (ADR: ExMA)
    - Parsing split from handling: the transport hands raw bytes to handle_raw(), tests
      can call handle() with a dict
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from septa_mcp.config import Settings
from septa_mcp.core.errors import ErrorKind, ProtocolError
from septa_mcp.core.tool_types import CallResult
from septa_mcp.schemas.jsonrpc import (
    INTERNAL_ERROR, INVALID_PARAMS, INVALID_REQUEST, JSONRPC_VERSION,
    METHOD_NOT_FOUND, PARSE_ERROR, JsonRpcError, JsonRpcRequest,
    JsonRpcResponse, ToolCallParams,
)
from septa_mcp.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)

_KIND_TO_RPC_CODE = {
    ErrorKind.TOOL_NOT_FOUND: INVALID_PARAMS,
    ErrorKind.INVALID_ARGUMENTS: INVALID_PARAMS,
    ErrorKind.UPSTREAM_FAILURE: INTERNAL_ERROR,
    ErrorKind.PROTOCOL_ERROR: INVALID_REQUEST,
}


class _MethodError(Exception):
    """Internal: short-circuits a method with a JSON-RPC error."""

    def __init__(self, code: int, message: str, data: dict | None = None):
        super().__init__(message)
        self.error = JsonRpcError(code=code, message=message, data=data)


def error_response(
    code: int, message: str, request_id: int | str | None = None,
    data: dict | None = None,
) -> JsonRpcResponse:
    return JsonRpcResponse(
        id=request_id, error=JsonRpcError(code=code, message=message, data=data),
    )


def call_result_to_response(
    result: CallResult, request_id: int | str | None,
) -> JsonRpcResponse:
    """Serialize a dispatch envelope as a JSON-RPC reply."""
    if result.error is None:
        return JsonRpcResponse(id=request_id, result=result.to_dict())
    return error_response(
        _KIND_TO_RPC_CODE[result.error.kind],
        result.error.message,
        request_id,
        data=result.error.to_dict(),
    )


def parse_message(raw: bytes | str) -> Any:
    """Decode the request body. Raises ProtocolError on malformed JSON."""
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise ProtocolError(f"Parse error: {e}", rpc_code=PARSE_ERROR)


class JsonRpcHandler:
    """Handles initialize, ping, tools/list and tools/call."""

    def __init__(self, dispatch: ToolDispatch, settings: Settings):
        self._dispatch = dispatch
        self._settings = settings
        self._methods = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._tools_list,
        }

    async def handle_raw(self, raw: bytes | str) -> JsonRpcResponse | None:
        try:
            message = parse_message(raw)
        except ProtocolError as e:
            logger.warning(e.message, extra={"error_code": e.code})
            return error_response(e.rpc_code, "Parse error")
        return await self.handle(message)

    async def handle(self, message: Any) -> JsonRpcResponse | None:
        if not isinstance(message, dict):
            return error_response(
                INVALID_REQUEST, "Invalid Request: expected a JSON object",
            )
        raw_id = message.get("id")
        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError:
            request_id = raw_id if isinstance(raw_id, (int, str)) else None
            return error_response(
                INVALID_REQUEST, "Invalid Request: malformed message", request_id,
            )

        if request.jsonrpc != JSONRPC_VERSION:
            return error_response(
                INVALID_REQUEST,
                'Invalid Request: jsonrpc must be "2.0"',
                request.id,
            )

        if request.is_notification:
            logger.info(
                "Notification received", extra={"rpc_method": request.method},
            )
            return None

        try:
            return await self._handle_request(request)
        except _MethodError as e:
            return JsonRpcResponse(id=request.id, error=e.error)
        except Exception as e:
            logger.error(
                f"Unhandled error in {request.method}: {e}",
                exc_info=True,
                extra={"rpc_method": request.method},
            )
            return error_response(INTERNAL_ERROR, "Internal error", request.id)

    async def _handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        if request.method == "tools/call":
            return await self._tools_call(request)
        method = self._methods.get(request.method)
        if method is None:
            raise _MethodError(
                METHOD_NOT_FOUND, f"Method not found: {request.method}",
            )
        return JsonRpcResponse(id=request.id, result=method())

    def _initialize(self) -> dict:
        return {
            "protocolVersion": self._settings.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": {
                "name": self._settings.server_name,
                "version": self._settings.server_version,
            },
        }

    def _ping(self) -> dict:
        return {}

    def _tools_list(self) -> dict:
        return {
            "tools": [d.to_dict() for d in self._dispatch.registry.list()],
        }

    async def _tools_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            params = ToolCallParams.model_validate(request.params or {})
        except ValidationError:
            raise _MethodError(
                INVALID_PARAMS, "Invalid params: tools/call requires a tool name",
            )
        logger.info(
            "tools/call",
            extra={"rpc_method": request.method, "tool_name": params.name},
        )
        result = await self._dispatch.dispatch(params.name, params.arguments)
        return call_result_to_response(result, request.id)
