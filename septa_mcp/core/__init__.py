"""Core: pure types, errors and validation. Never imports from services, api or infrastructure."""
