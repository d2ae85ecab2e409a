"""
Bounded in-memory response cache.

Eviction policy: least-recently-used once ``capacity`` entries are held. When
``ttl_seconds`` is set, entries additionally expire that many seconds after
they were written.
"""

import asyncio
import logging
from typing import Optional, Dict, Any

from cachetools import LRUCache, TTLCache

from .base import ResponseCache, hit_rate_pct
from ..models import AIResponse

logger = logging.getLogger(__name__)


class InMemoryResponseCache(ResponseCache):
    """Process-local cache backed by cachetools, guarded by an asyncio lock."""

    def __init__(self, capacity: int = 1000, ttl_seconds: Optional[float] = None):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")

        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        if ttl_seconds:
            self._entries = TTLCache(maxsize=capacity, ttl=ttl_seconds)
        else:
            self._entries = LRUCache(maxsize=capacity)

        self._lock = asyncio.Lock()
        self.hits = 0
        self.misses = 0

    async def get(self, key: str) -> Optional[AIResponse]:
        async with self._lock:
            response = self._entries.get(key)
            if response is None:
                self.misses += 1
                logger.debug(f"Cache MISS: {key[:50]}")
                return None

            self.hits += 1
            logger.debug(f"Cache HIT: {key[:50]}")
            return response

    async def set(self, key: str, response: AIResponse) -> bool:
        async with self._lock:
            self._entries[key] = response
        logger.debug(f"Cached: {key[:50]} (ttl={self.ttl_seconds or 'none'})")
        return True

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._entries.pop(key, None) is not None

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
        logger.info("Cleared in-memory response cache")

    async def get_stats(self) -> Dict[str, Any]:
        async with self._lock:
            size = len(self._entries)
        return {
            "backend": "memory",
            "cached_items": size,
            "capacity": self.capacity,
            "ttl_seconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
            "total_requests": self.hits + self.misses,
            "hit_rate_pct": hit_rate_pct(self.hits, self.misses),
        }
