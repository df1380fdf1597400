"""Argument Validation: pure shape checks of a raw argument bag against a tool schema.

Invariants:
    - Every required field must be present in the bag
    - A present field whose property declares a type must classify to that type
    - First violation raises ToolValidationError carrying the offending field
    - Extra fields are ignored (forward-compatible)
    - A missing (None) bag is treated as empty, never crashes

Design Decisions:
    - classify() maps raw values onto JsonKind, and type checks match on the kind
      instead of isinstance sprinkled through handlers
    - bool is checked before int: Python bools are ints, JSON booleans are not numbers
    - Unknown declared type names are not enforced (schema drift should not break calls)
"""

from enum import Enum
from typing import Any

from septa_mcp.core.errors import ToolValidationError
from septa_mcp.core.tool_types import ParameterSchema


class JsonKind(str, Enum):
    """JSON value variants an argument can take."""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


def classify(value: Any) -> JsonKind:
    """Return the JSON variant of a decoded argument value."""
    match value:
        case None:
            return JsonKind.NULL
        case bool():
            return JsonKind.BOOLEAN
        case int():
            return JsonKind.INTEGER
        case float():
            return JsonKind.NUMBER
        case str():
            return JsonKind.STRING
        case dict():
            return JsonKind.OBJECT
        case list() | tuple():
            return JsonKind.ARRAY
        case _:
            raise TypeError(f"Not a JSON value: {type(value).__name__}")


def kind_matches(kind: JsonKind, declared: str) -> bool:
    """True when a value of `kind` satisfies the declared schema type."""
    if declared == JsonKind.NUMBER.value:
        return kind in (JsonKind.INTEGER, JsonKind.NUMBER)
    return kind.value == declared


_KNOWN_TYPES = frozenset(k.value for k in JsonKind)


def validate_arguments(
    schema: ParameterSchema, bag: Any,
) -> dict[str, Any]:
    """Check bag against schema. Returns the bag (as a new dict) when valid."""
    if bag is None:
        bag = {}
    if not isinstance(bag, dict):
        raise ToolValidationError(
            "Tool arguments must be an object", field="arguments",
        )

    for name in sorted(schema.required):
        if name not in bag:
            raise ToolValidationError(
                f"Missing required argument '{name}'", field=name,
            )

    for name, spec in schema.properties.items():
        if name not in bag or spec.type not in _KNOWN_TYPES:
            continue
        try:
            kind = classify(bag[name])
        except TypeError:
            raise ToolValidationError(
                f"Argument '{name}' is not a JSON value", field=name,
            )
        if not kind_matches(kind, spec.type):
            raise ToolValidationError(
                f"Argument '{name}' must be of type {spec.type}, got {kind.value}",
                field=name,
            )
    return dict(bag)
