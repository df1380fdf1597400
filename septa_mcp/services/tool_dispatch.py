"""Tool Dispatch: resolve, validate, execute, and wrap every tool call in a CallResult.

Invariants:
    - Unknown tools return ToolNotFound (never raises)
    - Invalid arguments return InvalidArguments naming the offending field
    - UpstreamError from a handler returns UpstreamFailure with cause and status code
    - Successful payloads are passed through unchanged
    - No retries: a failed upstream call surfaces immediately
    - Every call logged with tool name and outcome

Design Decisions:
    - Per-call errors caught here and converted via TransitMCPError.to_error_info():
      callers only ever see an envelope
    - Any other exception raised by a handler is logged with a full trace and reported
      as UpstreamFailure naming only the exception type: no fault crosses dispatch()
"""

import logging
from typing import Any

from septa_mcp.core.errors import (
    ErrorInfo, ErrorKind, ToolValidationError, UnknownToolError, UpstreamError,
)
from septa_mcp.core.tool_types import CallResult
from septa_mcp.core.validate_arguments import validate_arguments
from septa_mcp.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolDispatch:
    """Routes tool_name -> registered handler with validation and error mapping."""

    def __init__(self, registry: ToolRegistry):
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def dispatch(self, name: str, bag: Any) -> CallResult:
        """Run one tool call. Returns a content or error envelope."""
        try:
            entry = self._registry.lookup(name)
            args = validate_arguments(entry.descriptor.schema, bag)
            payload = await entry.handler.execute(args)
        except (UnknownToolError, ToolValidationError, UpstreamError) as exc:
            logger.warning(
                f"Tool call failed: {exc.message}",
                extra={
                    "tool_name": name,
                    "error_code": exc.code,
                    "error_kind": exc.kind.value,
                    "status_code": getattr(exc, "status_code", None),
                },
            )
            return CallResult.fail(exc.to_error_info())
        except Exception as exc:
            logger.error(
                f"Tool handler raised {type(exc).__name__}: {exc}",
                exc_info=True,
                extra={"tool_name": name, "error_kind": ErrorKind.UPSTREAM_FAILURE.value},
            )
            return CallResult.fail(ErrorInfo(
                kind=ErrorKind.UPSTREAM_FAILURE,
                message=f"Tool '{name}' failed: {type(exc).__name__}",
            ))

        logger.info("Tool call succeeded", extra={"tool_name": name})
        return CallResult.ok(payload)
