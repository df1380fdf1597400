"""SEPTA Transit MCP: tool registry, dispatch and transport over the SEPTA public API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
