"""Guide cache: Redis, or a no-op when no store is configured."""

from .service import CacheReadError, GuideCache, NullGuideCache, RedisGuideCache

__all__ = [
    "CacheReadError",
    "GuideCache",
    "NullGuideCache",
    "RedisGuideCache",
]
