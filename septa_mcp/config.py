"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - upstream_timeout_seconds > 0: every outbound call is bounded
    - message_path always starts with "/"

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
      (ADR: developer UX)
    - Defaults provided for every setting: the server works out-of-the-box, no secrets needed
    - sse_max_duration_seconds unset by default: the hosting platform's own
      request timeout ends the stream
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Server identity (discovery + MCP initialize)
    server_name: str = "SEPTA Transit MCP"
    server_version: str = "2.0.0"
    protocol_version: str = "2024-11-05"

    # Upstream SEPTA API
    septa_base_url: str = "https://www3.septa.org/api"
    upstream_timeout_seconds: float = 10.0
    upstream_http_fallback: bool = True

    @field_validator("upstream_timeout_seconds")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("upstream_timeout_seconds must be positive")
        return v

    @field_validator("septa_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Transport
    message_path: str = "/message"
    sse_keepalive_seconds: float = 15.0
    sse_max_duration_seconds: float | None = None

    @field_validator("message_path")
    @classmethod
    def ensure_leading_slash(cls, v: str) -> str:
        v = v.strip()
        return v if v.startswith("/") else f"/{v}"

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
