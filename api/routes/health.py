"""Health check and system status routes."""

import time
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from core.config import settings
from schemas.common import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns basic service health information.
    """
    return HealthResponse(
        status="healthy",
        version=settings.version,
        timestamp=int(time.time()),
    )


@router.get("/health/detailed")
async def detailed_health_check(request: Request) -> dict[str, Any]:
    """
    Detailed health check with configuration summary.

    Only available in debug mode.
    """
    if not settings.debug:
        raise HTTPException(
            status_code=404,
            detail={"error": "not_found", "description": "Endpoint not available"},
        )

    return {
        "status": "healthy",
        "version": settings.version,
        "timestamp": int(time.time()),
        "request_id": getattr(request.state, "request_id", None),
        "config": {
            "debug": settings.debug,
            "public_url": settings.public_url,
            "currency": settings.currency,
            "stripe_api_version": settings.stripe_api_version,
            "stripe_configured": bool(settings.stripe_secret_key),
        },
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 when the service is alive.
    """
    return {"status": "alive"}
