"""
AI routing API endpoints

Exposes the AI request router over HTTP: single, batch and streaming
processing, provider management and cache management.
"""

import json
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from hera_ai.core.logging import setup_logging
from hera_ai.schemas.ai import (
    AIRequestSchema,
    AIResponseSchema,
    BatchRequestSchema,
    BatchResponseSchema,
    ProviderAvailabilityUpdate,
    ProviderInfoSchema,
)
from hera_ai.services.ai_service import get_ai_router
from hera_ai.services.routing import AIRequestRouter

logger = setup_logging(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/process", response_model=AIResponseSchema)
async def process_request(
    payload: AIRequestSchema,
    ai_router: AIRequestRouter = Depends(get_ai_router)
):
    """
    Route one AI request.

    Always answers 200 with the response envelope; callers check ``success``.
    """
    response = await ai_router.process_request(payload.to_request())
    return AIResponseSchema.from_response(response)


@router.post("/batch", response_model=BatchResponseSchema)
async def process_batch(
    payload: BatchRequestSchema,
    ai_router: AIRequestRouter = Depends(get_ai_router)
):
    """Route several requests concurrently; results are in input order."""
    responses = await ai_router.process_batch(
        [item.to_request() for item in payload.requests],
        max_concurrency=payload.max_concurrency
    )
    succeeded = sum(1 for r in responses if r.success)

    return BatchResponseSchema(
        responses=[AIResponseSchema.from_response(r) for r in responses],
        succeeded=succeeded,
        failed=len(responses) - succeeded
    )


@router.post("/stream")
async def stream_request(
    payload: AIRequestSchema,
    ai_router: AIRequestRouter = Depends(get_ai_router)
):
    """
    Stream one AI request as server-sent events.

    Emits ``chunk`` events while text arrives and a final ``complete`` event
    carrying the response envelope.
    """
    request = payload.to_request()

    async def event_stream():
        async for event in ai_router.process_stream(request):
            yield f"event: {event.event}\ndata: {json.dumps(event.to_dict())}\n\n"

    return StreamingResponse(event_stream(), media_type="text/event-stream")


@router.get("/providers", response_model=List[ProviderInfoSchema])
async def list_providers(ai_router: AIRequestRouter = Depends(get_ai_router)):
    """Configured providers with availability, status and success rate."""
    return ai_router.registry.get_provider_info()


@router.put("/providers/{provider_id}/availability", response_model=ProviderInfoSchema)
async def set_provider_availability(
    provider_id: str,
    payload: ProviderAvailabilityUpdate,
    ai_router: AIRequestRouter = Depends(get_ai_router)
):
    """Mark a provider up or down. Unknown ids answer 404."""
    descriptor = ai_router.registry.set_available(provider_id, payload.available)
    logger.info(f"Provider '{descriptor.name}' availability set to {payload.available}")

    return next(
        info for info in ai_router.registry.get_provider_info()
        if info["name"] == descriptor.name
    )


@router.get("/providers/health")
async def providers_health(ai_router: AIRequestRouter = Depends(get_ai_router)) -> Dict[str, Any]:
    """Live health check against every provider backend."""
    return await ai_router.health_check()


@router.get("/routing")
async def routing_info(ai_router: AIRequestRouter = Depends(get_ai_router)) -> Dict[str, Any]:
    return ai_router.get_routing_info()


@router.get("/cache/stats")
async def cache_stats(ai_router: AIRequestRouter = Depends(get_ai_router)) -> Dict[str, Any]:
    return await ai_router.get_cache_stats()


@router.delete("/cache")
async def clear_cache(ai_router: AIRequestRouter = Depends(get_ai_router)) -> Dict[str, Any]:
    await ai_router.clear_cache()
    return {"cleared": True}
