"""Error Hierarchy: typed, categorized exceptions for every failure mode of the tool server.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Startup errors (DuplicateToolError, RegistryFrozenError) are CRITICAL and abort init
    - Per-call errors carry an ErrorKind and convert to ErrorInfo for the call envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TransitMCPError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorKind separate from code: code is the REST/log identifier, kind is the
      envelope vocabulary clients switch on
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    PROTOCOL = "protocol"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class ErrorKind(str, Enum):
    """Error kinds reported inside a CallResult envelope."""
    TOOL_NOT_FOUND = "ToolNotFound"
    INVALID_ARGUMENTS = "InvalidArguments"
    UPSTREAM_FAILURE = "UpstreamFailure"
    PROTOCOL_ERROR = "ProtocolError"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tool_name: str | None = None
    url: str | None = None
    debug_info: dict[str, Any] | None = None


@dataclass(frozen=True)
class ErrorInfo:
    """Structured per-call error: what went wrong and, when known, where."""
    kind: ErrorKind
    message: str
    field: str | None = None
    status_code: int | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        if self.status_code is not None:
            data["status_code"] = self.status_code
        return data


class TransitMCPError(Exception):
    """Base exception for all tool server errors."""

    kind: ErrorKind | None = None

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {"tool_name": self.context.tool_name},
            }
        }

    def to_error_info(self) -> ErrorInfo:
        """Convert to the ErrorInfo carried by a failed CallResult."""
        return ErrorInfo(
            kind=self.kind or ErrorKind.PROTOCOL_ERROR,
            message=self.message,
            field=getattr(self, "field", None),
            status_code=getattr(self, "status_code", None),
        )


# ─── Startup Errors (fatal) ─────────────────────────────────────

class DuplicateToolError(TransitMCPError):
    """A tool name was registered twice."""
    def __init__(self, tool_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.tool_name = tool_name
        super().__init__(
            f"Tool '{tool_name}' is already registered",
            "DUPLICATE_TOOL", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.tool_name = tool_name


class RegistryFrozenError(TransitMCPError):
    """Registration attempted after the registry was sealed at startup."""
    def __init__(self, tool_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.tool_name = tool_name
        super().__init__(
            f"Cannot register '{tool_name}': registry is frozen",
            "REGISTRY_FROZEN", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.tool_name = tool_name


class ServiceNotReadyError(TransitMCPError):
    """A request arrived before the lifespan built the dispatcher."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Tool server is not ready: dispatcher not initialized",
            "SERVICE_NOT_READY", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, context, 503,
        )


# ─── Per-call Errors (recoverable) ──────────────────────────────

class UnknownToolError(TransitMCPError):
    """No tool registered under the requested name."""
    kind = ErrorKind.TOOL_NOT_FOUND

    def __init__(self, tool_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.tool_name = tool_name
        super().__init__(
            f"Tool '{tool_name}' does not exist",
            "UNKNOWN_TOOL", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )
        self.tool_name = tool_name


class ToolValidationError(TransitMCPError):
    """Tool arguments do not satisfy the declared parameter schema."""
    kind = ErrorKind.INVALID_ARGUMENTS

    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class UpstreamError(TransitMCPError):
    """The SEPTA API failed: transport error, non-200 status, or non-JSON body."""
    kind = ErrorKind.UPSTREAM_FAILURE

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UPSTREAM_FAILURE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.status_code = status_code


class ProtocolError(TransitMCPError):
    """Inbound message is not valid JSON or not a well-formed request."""
    kind = ErrorKind.PROTOCOL_ERROR

    def __init__(self, message: str, rpc_code: int, context: ErrorContext | None = None):
        super().__init__(
            message, "PROTOCOL_ERROR", ErrorCategory.PROTOCOL,
            ErrorSeverity.WARNING, context, 400,
        )
        self.rpc_code = rpc_code
