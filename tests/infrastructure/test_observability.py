"""Structured Logging: tests for the JSON formatter and idempotent setup."""

import json
import logging

from septa_mcp.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "septa_mcp.test", logging.WARNING, __file__, 1, "call %s", ("failed",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_core_fields_and_extras():
    line = JSONFormatter().format(_record(tool_name="get_bus_locations", status_code=500))
    data = json.loads(line)
    assert data["level"] == "WARNING"
    assert data["logger"] == "septa_mcp.test"
    assert data["message"] == "call failed"
    assert data["tool_name"] == "get_bus_locations"
    assert data["status_code"] == 500
    assert "error_code" not in data


def test_setup_logging_does_not_stack_handlers():
    before = len(logging.root.handlers)
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    ours = [h for h in logging.root.handlers if h.get_name() == "septa_mcp"]
    assert len(ours) == 1
    assert len(logging.root.handlers) <= before + 1
    assert logging.root.level == logging.INFO
    logging.root.removeHandler(ours[0])
