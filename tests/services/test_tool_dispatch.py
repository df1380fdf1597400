"""Tool Dispatch: tests for resolve -> validate -> execute -> envelope.

Tests cover:
    - every registered tool returns re-parseable JSON matching the mocked body
    - unknown tools return ToolNotFound (never raises)
    - missing / mistyped route returns InvalidArguments naming route
    - HTTP 500 upstream returns UpstreamFailure carrying 500
    - invalid arguments never reach the upstream
    - unexpected handler exceptions still come back as UpstreamFailure
"""

import httpx
import pytest

from septa_mcp.core.errors import ErrorKind
from septa_mcp.core.tool_types import ToolDescriptor
from septa_mcp.services.tool_dispatch import ToolDispatch
from septa_mcp.services.tools_registry import ToolRegistry
from tests.fake_septa import (
    ALERTS_PATH, DETOURS_PATH, LOCATIONS_PATH, text_payload,
)

BUS_BODY = {"bus": [{"VehicleID": "8412", "lat": "39.95", "lng": "-75.16"}]}
DETOUR_BODY = [{"route_id": "23", "route_info": []}]
ALERT_BODY = [{"route": "generic", "current_message": ""}]


@pytest.mark.parametrize("tool, args, path, body", [
    ("get_bus_locations", {"route": "23"}, LOCATIONS_PATH, BUS_BODY),
    ("get_bus_detours", {"route": "23"}, DETOURS_PATH, DETOUR_BODY),
    ("get_transit_alerts", {}, ALERTS_PATH, ALERT_BODY),
])
async def test_dispatch_success_returns_upstream_json(
    dispatch, fake_septa, tool, args, path, body,
):
    fake_septa.json(path, body)
    result = await dispatch.dispatch(tool, args)
    assert not result.is_error
    assert text_payload(result) == body
    assert len(fake_septa.requests) == 1


async def test_dispatch_text_is_indented_json(dispatch, fake_septa):
    fake_septa.json(LOCATIONS_PATH, BUS_BODY)
    result = await dispatch.dispatch("get_bus_locations", {"route": "23"})
    assert "\n  " in result.content[0].text


async def test_dispatch_returns_error_for_unknown_tool(dispatch):
    result = await dispatch.dispatch("nonexistent", {})
    assert result.error.kind is ErrorKind.TOOL_NOT_FOUND


async def test_dispatch_missing_route_is_invalid_arguments(dispatch, fake_septa):
    result = await dispatch.dispatch("get_bus_locations", {})
    assert result.error.kind is ErrorKind.INVALID_ARGUMENTS
    assert result.error.field == "route"
    assert fake_septa.requests == []


async def test_dispatch_wrong_type_is_invalid_arguments(dispatch, fake_septa):
    result = await dispatch.dispatch("get_bus_locations", {"route": 123})
    assert result.error.kind is ErrorKind.INVALID_ARGUMENTS
    assert result.error.field == "route"
    assert fake_septa.requests == []


async def test_dispatch_none_bag_for_alerts_succeeds(dispatch, fake_septa):
    fake_septa.json(ALERTS_PATH, ALERT_BODY)
    result = await dispatch.dispatch("get_transit_alerts", None)
    assert text_payload(result) == ALERT_BODY


async def test_dispatch_upstream_500_is_upstream_failure(dispatch, fake_septa):
    fake_septa.status(LOCATIONS_PATH, 500, "Internal Server Error")
    result = await dispatch.dispatch("get_bus_locations", {"route": "23"})
    assert result.error.kind is ErrorKind.UPSTREAM_FAILURE
    assert result.error.status_code == 500
    assert "500" in result.error.message


async def test_dispatch_connection_error_is_upstream_failure(dispatch, fake_septa):
    fake_septa.raises(DETOURS_PATH, httpx.ConnectError)
    result = await dispatch.dispatch("get_bus_detours", {"route": "23"})
    assert result.error.kind is ErrorKind.UPSTREAM_FAILURE
    assert result.error.status_code is None


async def test_dispatch_non_json_body_is_upstream_failure(dispatch, fake_septa):
    fake_septa.text(ALERTS_PATH, "<html>maintenance</html>")
    result = await dispatch.dispatch("get_transit_alerts", {})
    assert result.error.kind is ErrorKind.UPSTREAM_FAILURE


async def test_dispatch_unexpected_handler_error_is_upstream_failure():
    class _Exploding:
        async def execute(self, args):
            raise KeyError("internal")

    registry = ToolRegistry()
    registry.register(ToolDescriptor(name="boom", description="x"), _Exploding())
    registry.freeze()

    result = await ToolDispatch(registry).dispatch("boom", {})
    assert result.error.kind is ErrorKind.UPSTREAM_FAILURE
    assert result.error.message == "Tool 'boom' failed: KeyError"


async def test_dispatch_non_object_bag_is_invalid_arguments(dispatch, fake_septa):
    result = await dispatch.dispatch("get_bus_locations", ["23"])
    assert result.error.kind is ErrorKind.INVALID_ARGUMENTS
    assert result.error.field == "arguments"
    assert fake_septa.requests == []
