from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from carousel.reviews.cache.memory import MAX_TTL_SECONDS, MemoryCache
from carousel.reviews.cache.models import CacheStats
from carousel.reviews.cache.sweeper import DEFAULT_SWEEP_INTERVAL_SECONDS
from carousel.reviews.core.config import Settings

logger = logging.getLogger(__name__)


class CacheBackendNotImplementedError(NotImplementedError):
    """Raised when a declared but unimplemented cache backend is selected."""

    def __init__(self, backend: str):
        super().__init__(f"Cache backend '{backend}' is not implemented")
        self.backend = backend


class ReviewsCache(Protocol):
    """Interface the data-fetch layer depends on."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None: ...

    def delete(self, key: str) -> bool: ...

    def has(self, key: str) -> bool: ...

    def clear(self) -> None: ...

    def stats(self) -> CacheStats: ...

    def close(self) -> None: ...


def create_cache(
    backend: str = "memory",
    ttl_seconds: float = MAX_TTL_SECONDS,
    max_items: int = 1000,
    max_memory_mb: float = 50,
    sweep_interval_seconds: Optional[float] = DEFAULT_SWEEP_INTERVAL_SECONDS,
) -> ReviewsCache:
    backend = (backend or "memory").lower()

    if backend == "memory":
        logger.info(
            "Using in-memory cache (ttl=%ss, max_items=%d, max_memory=%sMB)",
            min(ttl_seconds, MAX_TTL_SECONDS),
            max_items,
            max_memory_mb,
        )
        return MemoryCache(
            default_ttl_seconds=ttl_seconds,
            max_items=max_items,
            max_memory_mb=max_memory_mb,
            sweep_interval_seconds=sweep_interval_seconds,
        )

    # TODO: implement a shared Redis backend behind ReviewsCache
    if backend == "redis":
        raise CacheBackendNotImplementedError(backend)

    raise ValueError(f"Unknown cache backend: {backend}")


def create_cache_from_settings(settings: Settings) -> ReviewsCache:
    return create_cache(
        backend=settings.cache_type,
        ttl_seconds=settings.cache_ttl_seconds,
        max_items=settings.cache_max_items,
        max_memory_mb=settings.cache_max_memory_mb,
        sweep_interval_seconds=settings.cache_sweep_interval_seconds,
    )
