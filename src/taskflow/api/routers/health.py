"""Health and readiness endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.system import Envelope, HealthCheckResponse

router = APIRouter(tags=["system"])


@router.get(
    "/healthz",
    response_model=Envelope[HealthCheckResponse],
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def read_health() -> Envelope[HealthCheckResponse]:
    """Return a simple heartbeat payload for health checks."""
    return Envelope[HealthCheckResponse](success=True, data=HealthCheckResponse(status="ok"))
