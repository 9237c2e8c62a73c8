"""
Health check endpoints for the character gateway.

Health checks report on the gateway process only; they never call the upstream API
and never reveal the credential.
"""

import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from character_gateway import __version__


class HealthStatus(BaseModel):
    """Health status response model."""
    status: str
    timestamp: str
    version: str
    uptime_seconds: float
    upstream: str
    credential_configured: bool


# Track service start time for uptime calculation
_start_time = time.time()

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthStatus,
    summary="Basic health check",
    description="Returns basic health status of the character gateway"
)
async def health_check(request: Request) -> HealthStatus:
    """
    Basic health check endpoint.

    Returns:
        HealthStatus: Status, version, uptime and which upstream is proxied.
    """
    settings = request.app.state.settings

    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 3),
        upstream=settings.upstream_base_url,
        credential_configured=settings.has_api_key
    )


@router.get(
    "/ready",
    summary="Readiness check",
    description="Returns 200 if the gateway can accept requests"
)
async def readiness_check(request: Request) -> Dict[str, str]:
    """
    Readiness check endpoint.

    Raises:
        HTTPException: 503 if the upstream client has been shut down.
    """
    upstream_client = request.app.state.upstream_client
    if upstream_client.client.is_closed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready - upstream client is closed"
        )

    return {"status": "ready"}
