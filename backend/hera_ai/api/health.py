"""Health check endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from hera_ai.core.config import get_settings
from hera_ai.services.ai_service import get_ai_router
from hera_ai.services.routing import AIRequestRouter

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    version: str
    environment: str
    providers_available: int
    providers_configured: int


@router.get("/health", response_model=HealthResponse)
async def health_check(ai_router: AIRequestRouter = Depends(get_ai_router)):
    """
    Health check endpoint.

    Degraded when no provider is available; every AI request would then
    report a total outage.
    """
    settings = get_settings()
    available = ai_router.registry.available_providers()

    return HealthResponse(
        status="healthy" if available else "degraded",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        providers_available=len(available),
        providers_configured=len(ai_router.registry),
    )
