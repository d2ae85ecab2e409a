"""
Redis-backed response cache for multi-process deployments.

Provides:
- Redis client singleton
- JSON-serialised responses stored with SETEX
- Hit/miss tracking in Redis
"""

import json
import hashlib
import logging
from typing import Optional, Dict, Any

import redis.asyncio as redis

from .base import ResponseCache, hit_rate_pct
from hera_ai.core.exceptions import CacheError
from ..models import AIResponse

logger = logging.getLogger(__name__)

# Global Redis client (singleton)
_redis_client: Optional[redis.Redis] = None


def get_redis_client(redis_url: str) -> redis.Redis:
    """
    Get or create global Redis client.

    Returns:
        Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.from_url(
            redis_url,
            decode_responses=True,
            encoding="utf-8"
        )
        logger.info(f"Initialized Redis cache client: {redis_url}")

    return _redis_client


class RedisResponseCache(ResponseCache):
    """
    Response cache stored in Redis.

    Every entry expires after ``ttl_seconds``; Redis' own maxmemory policy
    governs eviction beyond that.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        prefix: str = "hera:ai",
        ttl_seconds: int = 3600
    ):
        """
        Initialize cache.

        Args:
            redis_client: Redis client instance
            prefix: Cache key prefix
            ttl_seconds: TTL applied to every entry (default: 1 hour)
        """
        self.redis = redis_client
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds

        # Tracking keys for hits/misses
        self.hits_key = f"cache:hits:{prefix}"
        self.misses_key = f"cache:misses:{prefix}"

    def _make_key(self, identifier: str) -> str:
        """
        Create cache key from a request fingerprint.

        Returns:
            Cache key: "{prefix}:{identifier or its md5}"
        """
        # Hash long identifiers for consistent key length
        if len(identifier) > 100:
            identifier = hashlib.md5(identifier.encode()).hexdigest()

        return f"{self.prefix}:{identifier}"

    async def get(self, key: str) -> Optional[AIResponse]:
        cached = await self.redis.get(self._make_key(key))

        if cached:
            await self.redis.incr(self.hits_key)
            logger.debug(f"Cache HIT: {self.prefix}:{key[:50]}")
            try:
                return AIResponse.from_dict(json.loads(cached))
            except (ValueError, TypeError) as e:
                raise CacheError(
                    f"Corrupt cache entry for {key[:50]}",
                    details={"error": str(e)}
                ) from e

        await self.redis.incr(self.misses_key)
        logger.debug(f"Cache MISS: {self.prefix}:{key[:50]}")
        return None

    async def set(self, key: str, response: AIResponse) -> bool:
        redis_key = self._make_key(key)

        try:
            await self.redis.setex(
                redis_key,
                self.ttl_seconds,
                json.dumps(response.to_dict())
            )
            logger.debug(f"Cached: {self.prefix}:{key[:50]} (TTL: {self.ttl_seconds}s)")
            return True
        except Exception as e:
            logger.error(f"Failed to cache {redis_key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        deleted = await self.redis.delete(self._make_key(key))
        return deleted > 0

    async def clear(self) -> None:
        """Clear all cached responses for this prefix and the hit/miss stats."""
        keys = [key async for key in self.redis.scan_iter(match=f"{self.prefix}:*")]
        if keys:
            await self.redis.delete(*keys)
        await self.redis.delete(self.hits_key, self.misses_key)
        logger.info(f"Cleared all cached responses for: {self.prefix}")

    async def get_stats(self) -> Dict[str, Any]:
        hits = int(await self.redis.get(self.hits_key) or 0)
        misses = int(await self.redis.get(self.misses_key) or 0)
        cached_keys = [key async for key in self.redis.scan_iter(match=f"{self.prefix}:*")]

        return {
            "backend": "redis",
            "prefix": self.prefix,
            "cached_items": len(cached_keys),
            "ttl_seconds": self.ttl_seconds,
            "hits": hits,
            "misses": misses,
            "total_requests": hits + misses,
            "hit_rate_pct": hit_rate_pct(hits, misses),
        }
