"""SEPTA Client: wraps a pooled httpx.AsyncClient with timeouts, fallback, and error mapping.

Invariants:
    - Every request is bounded by the configured timeout
    - Only HTTP 200 with a JSON body is a success
    - Transport errors, non-200 statuses and non-JSON bodies all become UpstreamError
      (core/errors.py): raw httpx exceptions never leave this module
    - HTTPS failure retried once over plain HTTP when fallback is enabled;
      the last status code seen is kept on the final error

Design Decisions:
    - Wrapper over raw client: isolates transport concerns from tool handlers
      (ADR: single responsibility)
    - One AsyncClient per process, created in the lifespan: connection pooling
      across dispatches, safe for concurrent use
    - HTTP fallback is an endpoint fallback, not a retry policy: same request,
      other scheme, exactly once
    - transport parameter lets tests inject httpx.MockTransport
"""

import logging
from typing import Any

import httpx

from septa_mcp.core.errors import ErrorContext, UpstreamError

logger = logging.getLogger(__name__)

_BODY_PREVIEW_CHARS = 200


class SeptaClient:
    """GET-and-decode client for the SEPTA public API."""

    def __init__(
        self,
        base_url: str = "https://www3.septa.org/api",
        timeout_seconds: float = 10.0,
        http_fallback: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.http_fallback = http_fallback
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """Fetch path under the base URL and return the decoded JSON body."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            return await self._fetch(url, params)
        except UpstreamError as primary:
            fallback_url = self._fallback_url(url)
            if fallback_url is None:
                raise
            logger.warning(
                "HTTPS request failed, trying HTTP fallback: %s", primary.message,
                extra={"url": fallback_url, "status_code": primary.status_code},
            )
            try:
                return await self._fetch(fallback_url, params)
            except UpstreamError as secondary:
                raise UpstreamError(
                    f"SEPTA API failed for {path}. "
                    f"HTTPS error: {primary.message}. "
                    f"HTTP error: {secondary.message}",
                    status_code=secondary.status_code or primary.status_code,
                    context=ErrorContext(url=fallback_url),
                ) from secondary

    def _fallback_url(self, url: str) -> str | None:
        if not self.http_fallback or not url.startswith("https://"):
            return None
        return "http://" + url[len("https://"):]

    async def _fetch(self, url: str, params: dict[str, str] | None) -> Any:
        context = ErrorContext(url=url)
        logger.debug("GET %s params=%s", url, params, extra={"url": url})
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise UpstreamError(
                f"Request timed out after {self.timeout_seconds}s",
                context=context,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(
                f"Request failed: {e}", context=context,
            ) from e

        if response.status_code != httpx.codes.OK:
            raise UpstreamError(
                f"SEPTA API returned status code: {response.status_code}",
                status_code=response.status_code,
                context=context,
            )
        try:
            return response.json()
        except ValueError as e:
            preview = response.text[:_BODY_PREVIEW_CHARS]
            raise UpstreamError(
                f"Failed to decode response: {e}. Response: {preview}",
                status_code=response.status_code,
                context=context,
            ) from e
