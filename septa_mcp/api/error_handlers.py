"""Error Handlers: global exception handlers for the tool server API.

Invariants:
    - TransitMCPError -> structured JSON with error code, message, severity
    - Exception (catch-all) -> never leaks internal details

Design Decisions:
    - Two layers: domain (TransitMCPError) and catch-all (Exception)
    - JSON-RPC traffic rarely reaches these: the protocol layer answers with its own
      envelope. These cover dependency failures (ServiceNotReadyError) and bugs
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from septa_mcp.core.errors import ErrorSeverity, TransitMCPError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(TransitMCPError)
    async def domain_error_handler(request: Request, exc: TransitMCPError):
        logger.error(
            f"TransitMCPError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )
