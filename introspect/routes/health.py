"""Health endpoint for liveness checks."""

from fastapi import APIRouter

from introspect.models.service_models import HealthResponse
from introspect.services.base import utc_timestamp

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def liveness_probe() -> HealthResponse:
    """Returns without touching the datastore so orchestrators only see process liveness."""
    return HealthResponse(ok=True, ts=utc_timestamp())
