"""Define Transit Tools: MCP tool schemas for the SEPTA bus, detour and alert endpoints.

Invariants:
    - Every schema is a flat JSON-Schema object (inputSchema format of tools/list)
    - Required fields enforced by the argument validator, not handler code
    - Tool names unique across this module

Design Decisions:
    - Tool schemas in a dedicated file: explicit, no auto-discovery (ADR: ExMA anti-pattern)
    - get_transit_alerts has no inputs: stateless query pattern
    - SEPTA path + query parameter kept next to the schema so one entry fully
      describes one tool
"""

TOOL_GET_BUS_LOCATIONS = {
    "name": "get_bus_locations",
    "description": (
        "Get real-time locations for all vehicles on a specific SEPTA route "
        "using the TransitView API. Returns vehicle positions, directions, "
        "labels, and destinations."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "route": {
                "type": "string",
                "description": (
                    'The route number (e.g., "23", "33", "45", "G"). '
                    "Use official SEPTA route numbers."
                ),
            },
        },
        "required": ["route"],
    },
    "path": "TransitView/index.php",
    "query_param": "route",
}

TOOL_GET_BUS_DETOURS = {
    "name": "get_bus_detours",
    "description": (
        "Check for active detours on a specific SEPTA route using the "
        "Bus Detours API."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "route": {
                "type": "string",
                "description": "The route number to check for detours (e.g., '23', '45')",
            },
        },
        "required": ["route"],
    },
    "path": "BusDetours/index.php",
    "query_param": "route",
}

TOOL_GET_TRANSIT_ALERTS = {
    "name": "get_transit_alerts",
    "description": (
        "Get general system alerts and advisories for SEPTA services "
        "using the Alerts API."
    ),
    "input_schema": {
        "type": "object",
        "properties": {},
    },
    "path": "Alerts/index.php",
    "query_param": None,
}

TOOLS_TRANSIT = [
    TOOL_GET_BUS_LOCATIONS,
    TOOL_GET_BUS_DETOURS,
    TOOL_GET_TRANSIT_ALERTS,
]
