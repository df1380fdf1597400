"""Schemas: Pydantic models for the JSON-RPC wire format."""
