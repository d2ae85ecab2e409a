"""
Response caches for the AI router.

- InMemoryResponseCache: bounded LRU (optionally TTL) cache, the default
- RedisResponseCache: shared cache for multi-process deployments
"""

from hera_ai.core.config import Settings
from .base import ResponseCache
from .memory import InMemoryResponseCache
from .redis_cache import RedisResponseCache, get_redis_client


def build_response_cache(settings: Settings) -> ResponseCache:
    """Create the cache selected by AI_CACHE_BACKEND."""
    if settings.AI_CACHE_BACKEND == "redis":
        return RedisResponseCache(
            get_redis_client(settings.REDIS_URL),
            ttl_seconds=settings.AI_CACHE_TTL_SECONDS or 3600
        )
    return InMemoryResponseCache(
        capacity=settings.AI_CACHE_MAX_ENTRIES,
        ttl_seconds=settings.AI_CACHE_TTL_SECONDS
    )


__all__ = [
    "ResponseCache",
    "InMemoryResponseCache",
    "RedisResponseCache",
    "build_response_cache",
    "get_redis_client",
]
