from __future__ import annotations

from .factory import (
    CacheBackendNotImplementedError,
    ReviewsCache,
    create_cache,
    create_cache_from_settings,
)
from .memory import MAX_TTL_SECONDS, SOFT_LIMIT_RATIO, MemoryCache
from .models import CacheEntry, CacheStats
from .sizing import estimate_size

__all__ = [
    "CacheBackendNotImplementedError",
    "CacheEntry",
    "CacheStats",
    "MAX_TTL_SECONDS",
    "MemoryCache",
    "ReviewsCache",
    "SOFT_LIMIT_RATIO",
    "create_cache",
    "create_cache_from_settings",
    "estimate_size",
]
