"""Health Probe: liveness endpoint for container orchestration.

Invariants:
    - GET /api/v1/health/ returns 200 if the process is up and the registry is frozen
    - No upstream calls: health never depends on SEPTA availability
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from septa_mcp.api.dependencies import get_registry
from septa_mcp.config import Settings, get_settings
from septa_mcp.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)
HEALTH_PATH = "/api/v1/health/"

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def health_check(
    settings: Settings = Depends(get_settings),
    registry: ToolRegistry = Depends(get_registry),
):
    """Basic liveness probe."""
    if not registry.frozen:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "registry_not_initialized"},
        )
    return {
        "status": "healthy",
        "service": settings.server_name,
        "version": settings.server_version,
        "tools": len(registry),
    }
