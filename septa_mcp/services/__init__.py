"""Services: tool definitions, handlers, registry, dispatch and the JSON-RPC layer."""
