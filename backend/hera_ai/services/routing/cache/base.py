"""
Response cache interface.

Caches map a request fingerprint to a previously computed AIResponse. All
implementations must be safe to use from concurrent asyncio tasks.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

from ..models import AIResponse


class ResponseCache(ABC):
    """Base class for response caches."""

    @abstractmethod
    async def get(self, key: str) -> Optional[AIResponse]:
        """Return the cached response for ``key`` or None on a miss."""

    @abstractmethod
    async def set(self, key: str, response: AIResponse) -> bool:
        """Store a response. Returns True if it was cached."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove one entry. Returns True if something was removed."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry and reset hit/miss counters."""

    @abstractmethod
    async def get_stats(self) -> Dict[str, Any]:
        """Hits, misses, size and hit rate."""


def hit_rate_pct(hits: int, misses: int) -> float:
    total = hits + misses
    return (hits / total * 100) if total > 0 else 0
