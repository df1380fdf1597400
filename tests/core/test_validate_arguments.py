"""Argument Validation: tests for pure schema checks of raw argument bags.

Tests cover:
    - classify maps every JSON variant (bool is never a number)
    - required fields enforced, first violation names the field
    - declared types enforced on present fields
    - extra fields ignored, None bag treated as empty
"""

import pytest

from septa_mcp.core.errors import ErrorKind, ToolValidationError
from septa_mcp.core.tool_types import ParameterSchema
from septa_mcp.core.validate_arguments import (
    JsonKind, classify, kind_matches, validate_arguments,
)

ROUTE_SCHEMA = ParameterSchema.from_json_schema({
    "type": "object",
    "properties": {"route": {"type": "string", "description": "Route"}},
    "required": ["route"],
})


# ─── classify ────────────────────────────────────────────────────

@pytest.mark.parametrize("value, kind", [
    ("23", JsonKind.STRING),
    (23, JsonKind.INTEGER),
    (2.5, JsonKind.NUMBER),
    (True, JsonKind.BOOLEAN),
    (None, JsonKind.NULL),
    ({"a": 1}, JsonKind.OBJECT),
    ([1, 2], JsonKind.ARRAY),
])
def test_classify_json_values(value, kind):
    assert classify(value) is kind


def test_classify_rejects_non_json_value():
    with pytest.raises(TypeError):
        classify(object())


def test_integer_satisfies_number_but_bool_does_not():
    assert kind_matches(JsonKind.INTEGER, "number")
    assert not kind_matches(JsonKind.BOOLEAN, "number")
    assert not kind_matches(JsonKind.BOOLEAN, "integer")


# ─── validate_arguments ──────────────────────────────────────────

def test_valid_bag_passes_through():
    assert validate_arguments(ROUTE_SCHEMA, {"route": "23"}) == {"route": "23"}


def test_missing_required_field_names_field():
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(ROUTE_SCHEMA, {})
    assert exc_info.value.field == "route"
    assert exc_info.value.kind is ErrorKind.INVALID_ARGUMENTS


def test_none_bag_is_validation_failure_not_crash():
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(ROUTE_SCHEMA, None)
    assert exc_info.value.field == "route"


def test_wrong_type_rejected():
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(ROUTE_SCHEMA, {"route": 123})
    assert exc_info.value.field == "route"
    assert "string" in exc_info.value.message


def test_null_value_for_required_string_rejected():
    with pytest.raises(ToolValidationError):
        validate_arguments(ROUTE_SCHEMA, {"route": None})


def test_extra_fields_ignored():
    result = validate_arguments(ROUTE_SCHEMA, {"route": "G", "direction": 1})
    assert result["route"] == "G"


def test_empty_schema_accepts_empty_and_none_bags():
    schema = ParameterSchema.from_json_schema({"type": "object", "properties": {}})
    assert validate_arguments(schema, {}) == {}
    assert validate_arguments(schema, None) == {}


def test_non_object_bag_rejected():
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(ROUTE_SCHEMA, ["23"])
    assert exc_info.value.field == "arguments"


def test_optional_field_type_checked_when_present():
    schema = ParameterSchema.from_json_schema({
        "type": "object",
        "properties": {"limit": {"type": "integer"}},
    })
    assert validate_arguments(schema, {}) == {}
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(schema, {"limit": "ten"})
    assert exc_info.value.field == "limit"


def test_unknown_declared_type_not_enforced():
    schema = ParameterSchema.from_json_schema({
        "type": "object",
        "properties": {"when": {"type": "date-time"}},
        "required": ["when"],
    })
    assert validate_arguments(schema, {"when": 5}) == {"when": 5}
