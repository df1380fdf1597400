"""Tools Registry: name -> (descriptor, handler), populated once at startup then frozen.

Invariants:
    - Tool names unique: a duplicate registration raises DuplicateToolError
    - After freeze(), register() raises RegistryFrozenError: no runtime add/remove
    - lookup() and list() are pure reads; list() keeps registration order
    - build_registry() registers every transit tool and freezes before returning

Design Decisions:
    - Explicit registration from define_transit_tools.py: no auto-discovery (ADR: ExMA)
    - Freeze instead of a lock: population completes in the lifespan before any
      request is served, so reads need no synchronization
"""

import logging
from collections.abc import Iterable

from septa_mcp.core.errors import (
    DuplicateToolError, RegistryFrozenError, UnknownToolError,
)
from septa_mcp.core.tool_types import (
    ParameterSchema, RegistryEntry, ToolDescriptor, ToolHandler,
)
from septa_mcp.infrastructure.septa_client import SeptaClient
from septa_mcp.services.define_transit_tools import TOOLS_TRANSIT
from septa_mcp.services.handle_transit import SeptaEndpointTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Fixed set of tools known to this server."""

    def __init__(self):
        self._entries: dict[str, RegistryEntry] = {}
        self._frozen = False

    def register(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        if self._frozen:
            raise RegistryFrozenError(descriptor.name)
        if descriptor.name in self._entries:
            raise DuplicateToolError(descriptor.name)
        self._entries[descriptor.name] = RegistryEntry(descriptor, handler)
        logger.debug("Registered tool", extra={"tool_name": descriptor.name})

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> RegistryEntry:
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownToolError(name)
        return entry

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # Defined last: the method name shadows the builtin inside the class body.
    def list(self) -> list[ToolDescriptor]:
        return [entry.descriptor for entry in self._entries.values()]


def descriptor_from_definition(definition: dict) -> ToolDescriptor:
    """Build a ToolDescriptor from a define_*_tools.py entry."""
    return ToolDescriptor(
        name=definition["name"],
        description=definition["description"],
        schema=ParameterSchema.from_json_schema(definition["input_schema"]),
    )


def build_registry(
    client: SeptaClient, definitions: Iterable[dict] = TOOLS_TRANSIT,
) -> ToolRegistry:
    """Register every tool definition against client and freeze the registry."""
    registry = ToolRegistry()
    for definition in definitions:
        handler = SeptaEndpointTool(
            client=client,
            path=definition["path"],
            query_param=definition.get("query_param"),
        )
        registry.register(descriptor_from_definition(definition), handler)
    registry.freeze()
    logger.info("Tool registry ready with %d tools", len(registry))
    return registry
