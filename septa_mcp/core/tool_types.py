"""Tool Types: descriptors, parameter schemas, handlers and the call envelope.

Invariants:
    - ToolDescriptor and RegistryEntry are frozen: never mutated after registration
    - ToolDescriptor.name is non-empty
    - ParameterSchema is flat: properties map to primitive types, no nesting
    - CallResult holds exactly one of content / error

Design Decisions:
    - Frozen dataclasses over dicts: the registry stores data, not behaviour
    - ToolHandler as Protocol: handlers are small structs with execute(), no base class
      (ADR: structural subtyping, no inheritance hierarchy)
    - Schemas authored as JSON-Schema dicts (same shape clients receive in
      tools/list) and parsed once via ParameterSchema.from_json_schema
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from septa_mcp.core.errors import ErrorInfo


@dataclass(frozen=True)
class PropertySpec:
    """One declared field: its primitive type name and description."""
    type: str | None = None
    description: str = ""

    def to_json_schema(self) -> dict:
        data: dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type
        if self.description:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class ParameterSchema:
    """Object-typed parameter schema used for shape validation only."""
    properties: dict[str, PropertySpec] = field(default_factory=dict)
    required: frozenset[str] = frozenset()
    type: str = "object"

    @classmethod
    def from_json_schema(cls, schema: dict) -> "ParameterSchema":
        """Parse a JSON-Schema-shaped dict. Unknown keywords are ignored."""
        if schema.get("type", "object") != "object":
            raise ValueError("Tool parameter schema must have type 'object'")
        properties = {
            name: PropertySpec(
                type=spec.get("type"),
                description=spec.get("description", ""),
            )
            for name, spec in (schema.get("properties") or {}).items()
        }
        return cls(
            properties=properties,
            required=frozenset(schema.get("required") or ()),
        )

    def to_json_schema(self) -> dict:
        data: dict[str, Any] = {
            "type": self.type,
            "properties": {
                name: spec.to_json_schema()
                for name, spec in self.properties.items()
            },
        }
        if self.required:
            data["required"] = sorted(self.required)
        return data


@dataclass(frozen=True)
class ToolDescriptor:
    """Static metadata for one callable tool."""
    name: str
    description: str
    schema: ParameterSchema = field(default_factory=ParameterSchema)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Tool name must be non-empty")

    def to_dict(self) -> dict:
        """MCP tools/list entry."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.schema.to_json_schema(),
        }


@dataclass(frozen=True)
class TextContent:
    """A single content block of a tool result."""
    text: str
    type: str = "text"

    def to_dict(self) -> dict:
        return {"type": self.type, "text": self.text}


ResultPayload = list[TextContent]


class ToolHandler(Protocol):
    """Structural contract for tool handlers stored in the registry."""
    async def execute(self, args: dict[str, Any]) -> ResultPayload: ...


@dataclass(frozen=True)
class RegistryEntry:
    """Descriptor plus the handler that implements it."""
    descriptor: ToolDescriptor
    handler: ToolHandler


@dataclass(frozen=True)
class CallResult:
    """Uniform envelope returned by every dispatch."""
    content: tuple[TextContent, ...] | None = None
    error: ErrorInfo | None = None

    def __post_init__(self):
        if (self.content is None) == (self.error is None):
            raise ValueError("CallResult requires exactly one of content or error")

    @classmethod
    def ok(cls, payload: ResultPayload) -> "CallResult":
        return cls(content=tuple(payload))

    @classmethod
    def fail(cls, error: ErrorInfo) -> "CallResult":
        return cls(error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"error": self.error.to_dict()}
        return {"content": [block.to_dict() for block in self.content]}
