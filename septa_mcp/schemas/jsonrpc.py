"""JSON-RPC Schemas: Pydantic models for the synchronous MCP message boundary.

Invariants:
    - JsonRpcRequest accepts any jsonrpc string; the handler rejects != "2.0"
      with a JSON-RPC error, not an HTTP 422
    - id may be int, str or absent (absent = notification, no reply)
    - JsonRpcResponse carries exactly one of result / error

Design Decisions:
    - extra="allow" on requests: unknown top-level members are ignored
    - ToolCallParams.arguments left untyped (Any): the tool schema, not Pydantic,
      decides what is valid, so a non-object bag reaches validate_arguments and
      comes back as InvalidArguments
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

JSONRPC_VERSION = "2.0"

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JsonRpcRequest(BaseModel):
    """Inbound request or notification."""
    model_config = ConfigDict(extra="allow")

    jsonrpc: str | None = None
    method: str
    params: dict[str, Any] | None = None
    id: int | str | None = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


class ToolCallParams(BaseModel):
    """params of a tools/call request."""
    name: str = Field(min_length=1)
    arguments: Any = None


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: dict[str, Any] | None = None


class JsonRpcResponse(BaseModel):
    """Outbound reply; serialize with to_dict()."""
    jsonrpc: str = JSONRPC_VERSION
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def one_of_result_or_error(self) -> "JsonRpcResponse":
        if (self.result is None) == (self.error is None):
            raise ValueError("response needs exactly one of result or error")
        return self

    def to_dict(self) -> dict:
        data = self.model_dump(exclude_none=True)
        data["id"] = self.id
        return data
