"""
Health Check Route
"""

from fastapi import APIRouter

from api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse()


@router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    return HealthResponse()
