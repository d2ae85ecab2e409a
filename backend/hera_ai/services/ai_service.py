"""
Process-wide AI router and convenience helpers.

The helpers wrap the common HERA call shapes so callers only supply a prompt;
they all go through the shared router and return the flat AIResponse.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from hera_ai.core.config import get_settings
from hera_ai.services.routing import (
    AIRequest,
    AIRequestRouter,
    AIResponse,
    TaskType,
    build_default_registry,
    build_response_cache,
)

logger = logging.getLogger(__name__)

CHAT_SMART_CODE = "HERA.AI.CHAT.COMPLETION.v1"
CODE_SMART_CODE = "HERA.AI.CODE.GENERATION.v1"
ANALYSIS_SMART_CODE = "HERA.AI.ANALYSIS.BUSINESS.v1"
ANALYSIS_REALTIME_SMART_CODE = "HERA.AI.ANALYSIS.REALTIME.v1"


@lru_cache()
def get_ai_router() -> AIRequestRouter:
    """Shared router built from application settings."""
    settings = get_settings()
    logger.info(
        f"Building AI router (cache={settings.AI_CACHE_BACKEND}, "
        f"timeout={settings.AI_PROVIDER_TIMEOUT_SECONDS}s)"
    )
    return AIRequestRouter(
        build_default_registry(settings),
        cache=build_response_cache(settings),
        batch_concurrency=settings.AI_BATCH_MAX_CONCURRENCY
    )


async def _run(
    smart_code: str,
    task_type: TaskType,
    prompt: str,
    router: Optional[AIRequestRouter],
    **fields: Any
) -> AIResponse:
    request = AIRequest(smart_code=smart_code, task_type=task_type, prompt=prompt, **fields)
    return await (router or get_ai_router()).process_request(request)


async def chat(
    prompt: str,
    context: Optional[Dict[str, Any]] = None,
    organization_id: Optional[str] = None,
    user_id: Optional[str] = None,
    router: Optional[AIRequestRouter] = None,
    realtime: bool = False,
    **fields: Any
) -> AIResponse:
    """Conversational completion. ``realtime`` requests bypass the cache."""
    smart_code = "HERA.AI.CHAT.REALTIME.v1" if realtime else CHAT_SMART_CODE
    return await _run(
        smart_code, TaskType.CHAT, prompt, router,
        context=context, organization_id=organization_id, user_id=user_id, **fields
    )


async def generate_code(
    prompt: str,
    language: Optional[str] = None,
    router: Optional[AIRequestRouter] = None,
    **fields: Any
) -> AIResponse:
    if language:
        prompt = f"Language: {language}\n\n{prompt}"
    return await _run(CODE_SMART_CODE, TaskType.CODE, prompt, router, **fields)


async def analyze(
    prompt: str,
    data: Optional[Dict[str, Any]] = None,
    router: Optional[AIRequestRouter] = None,
    **fields: Any
) -> AIResponse:
    """
    Business analysis.

    ``data`` is sent to the provider as context. Cache keys ignore context,
    so analyses over data bypass the response cache.
    """
    smart_code = ANALYSIS_REALTIME_SMART_CODE if data else ANALYSIS_SMART_CODE
    return await _run(smart_code, TaskType.ANALYSIS, prompt, router, context=data, **fields)


async def generate_learning_content(
    prompt: str,
    domain: str = "GENERAL",
    router: Optional[AIRequestRouter] = None,
    **fields: Any
) -> AIResponse:
    smart_code = f"HERA.EDU.UNIVERSAL.AI.ANALYZE.{domain.upper()}.v1"
    return await _run(smart_code, TaskType.LEARNING, prompt, router, **fields)
