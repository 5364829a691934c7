"""Guide cache service implementation.

This module provides an abstract guide cache interface, a Redis
implementation and a no-op implementation used when no Redis URL is
configured.

Guides are keyed by the normalized search term (trimmed, lowercased city
name). There is no TTL: a cached guide is served until it is overwritten.

Property: Cache Key Consistency
- "Tokyo", " tokyo " and "TOKYO" all map to the key "tokyo" and therefore
  to the same cached guide.
"""

import logging
from abc import ABC, abstractmethod

import redis.asyncio as redis
from pydantic import ValidationError

from cinescout.models import CacheEntry, TravelGuide

logger = logging.getLogger(__name__)


class CacheReadError(Exception):
    """Raised when stored guides cannot be read back from the cache."""

    user_message = "Could not load the explore wall."


class GuideCache(ABC):
    """Abstract base class for guide caches.

    Defines get/put by key plus a listing of the most recently stored guides,
    and provides a static method for building consistent cache keys.
    """

    @abstractmethod
    async def get(self, key: str) -> TravelGuide | None:
        """Retrieve a cached guide.

        Args:
            key: The normalized search key.

        Returns:
            The cached guide if found, None otherwise.
        """
        pass

    @abstractmethod
    async def put(self, key: str, guide: TravelGuide) -> None:
        """Store a guide, replacing any guide already stored under ``key``.

        Args:
            key: The normalized search key.
            guide: The guide to store.
        """
        pass

    @abstractmethod
    async def recent(self, limit: int = 12) -> list[CacheEntry]:
        """List the most recently stored guides, newest first.

        Args:
            limit: Maximum number of entries to return.
        """
        pass

    async def close(self) -> None:
        """Release any underlying connection."""

    @staticmethod
    def build_key(term: str) -> str:
        """Normalize a search term into a cache key.

        Example:
            >>> GuideCache.build_key("  Kyoto ")
            'kyoto'
        """
        return term.strip().lower()


class NullGuideCache(GuideCache):
    """Cache used when no store is configured: always misses, stores nothing."""

    async def get(self, key: str) -> TravelGuide | None:
        return None

    async def put(self, key: str, guide: TravelGuide) -> None:
        return None

    async def recent(self, limit: int = 12) -> list[CacheEntry]:
        return []


class RedisGuideCache(GuideCache):
    """Redis-based implementation of the guide cache.

    Each guide is stored as JSON under ``guide:<key>``. Keys are also kept in
    a capped list (``guides:recent``), newest first, for the explore wall.

    Attributes:
        _client: The Redis async client instance.
    """

    KEY_PREFIX = "guide:"
    RECENT_KEY = "guides:recent"
    RECENT_MAX = 100

    def __init__(self, redis_url: str = "redis://localhost:6379") -> None:
        """Initialize the Redis guide cache.

        Args:
            redis_url: Redis connection URL. Defaults to localhost:6379.
        """
        self._redis_url = redis_url
        self._client: redis.Redis | None = None

    async def connect(self) -> None:
        """Establish connection to Redis."""
        if self._client is None:
            self._client = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_connected(self) -> redis.Redis:
        if self._client is None:
            await self.connect()
        return self._client  # type: ignore

    def _guide_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    def _decode(self, key: str, value: str | None) -> TravelGuide | None:
        if value is None:
            return None
        try:
            return TravelGuide.model_validate_json(value)
        except ValidationError as e:
            logger.warning(f"[CACHE] Ignoring unreadable entry for '{key}': {e.error_count()} errors")
            return None

    async def get(self, key: str) -> TravelGuide | None:
        client = await self._ensure_connected()
        value = await client.get(self._guide_key(key))
        return self._decode(key, value)

    async def put(self, key: str, guide: TravelGuide) -> None:
        client = await self._ensure_connected()
        async with client.pipeline(transaction=False) as pipe:
            pipe.set(self._guide_key(key), guide.model_dump_json())
            pipe.lrem(self.RECENT_KEY, 0, key)
            pipe.lpush(self.RECENT_KEY, key)
            pipe.ltrim(self.RECENT_KEY, 0, self.RECENT_MAX - 1)
            await pipe.execute()

    async def recent(self, limit: int = 12) -> list[CacheEntry]:
        if limit <= 0:
            return []
        client = await self._ensure_connected()
        keys = await client.lrange(self.RECENT_KEY, 0, limit - 1)
        if not keys:
            return []
        values = await client.mget([self._guide_key(k) for k in keys])
        entries: list[CacheEntry] = []
        for key, value in zip(keys, values):
            guide = self._decode(key, value)
            if guide is not None:
                entries.append(CacheEntry(search_key=key, guide=guide))
        return entries
