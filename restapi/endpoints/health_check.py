"""Liveness endpoint."""

from fastapi import APIRouter

from components.core import schemas
from components.core.config import get_settings

router = APIRouter(
    prefix="/health_check",
    tags=["services"],
    responses={200: {"description": "Service is healthy"}},
)


@router.get("/", response_model=schemas.HealthCheck)
async def health_check() -> schemas.HealthCheck:
    """Report the service name and API version."""
    settings = get_settings()
    return schemas.HealthCheck(
        service_name=settings.APP_TITLE,
        api_version=settings.API_VERSION,
        status="healthy",
    )
