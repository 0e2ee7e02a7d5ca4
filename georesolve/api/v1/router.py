"""API v1 router module."""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from georesolve.api.v1.geocode.router import router as geocode_router
from georesolve.core.config import settings

router = APIRouter(default_response_class=JSONResponse)
router.include_router(geocode_router)


# Health check endpoint


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """
    Health check endpoint.

    Returns
    -------
        Dict containing health status and the active provider chain
    """
    state = getattr(request.app.state, "resources", None)
    health = (
        state.health_check()
        if state is not None
        else {"status": "unhealthy", "providers": []}
    )
    return {
        **health,
        "version": settings.version,
        "correlation_id": getattr(request.state, "correlation_id", "unknown"),
    }
