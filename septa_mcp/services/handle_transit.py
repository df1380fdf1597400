"""Transit Handlers: tools that fetch one SEPTA endpoint and return its JSON as text.

Invariants:
    - Exactly one upstream GET per execute() (plus at most one HTTP fallback in the client)
    - Query argument percent-encoded by httpx, never interpolated into the URL by hand
    - Result is a single text block holding the upstream JSON re-serialized with indent=2
    - Upstream failures surface as UpstreamError; handlers never retry

Design Decisions:
    - One small struct per tool (path + query parameter) instead of a switch over names:
      the registry stores the struct as data (ADR: no inheritance)
    - Handlers receive already-validated args from ToolDispatch
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from septa_mcp.core.tool_types import ResultPayload, TextContent
from septa_mcp.infrastructure.septa_client import SeptaClient

logger = logging.getLogger(__name__)


def format_json_payload(data: Any) -> ResultPayload:
    """Wrap an opaque JSON value as one pretty-printed text block."""
    return [TextContent(text=json.dumps(data, indent=2, ensure_ascii=False))]


@dataclass(frozen=True)
class SeptaEndpointTool:
    """Handler for a SEPTA GET endpoint with an optional single query parameter."""
    client: SeptaClient
    path: str
    query_param: str | None = None

    async def execute(self, args: dict[str, Any]) -> ResultPayload:
        params = None
        if self.query_param is not None:
            params = {self.query_param: args[self.query_param]}
        logger.info(
            "Fetching SEPTA %s params=%s", self.path, params,
            extra={"path": self.path},
        )
        data = await self.client.get_json(self.path, params)
        return format_json_payload(data)
