"""
Tiendas Backend — Health Check Route
======================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Static "OK" plus the current server time. It does not touch MongoDB
       or Cloudinary: it answers "is the process serving requests", nothing
       more.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from tiendasapp.schemas.store import HealthResponse

router = APIRouter(tags=["Health"])


def _iso_timestamp(moment: datetime) -> str:
    """UTC time as 2024-06-10T15:04:05.123Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="OK",
        message="Servidor funcionando correctamente",
        timestamp=_iso_timestamp(datetime.now(timezone.utc)),
    )
