from __future__ import annotations

import itertools
import logging
import threading
import time
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from carousel.reviews.cache.eviction import eviction_quota, lru_order
from carousel.reviews.cache.models import CacheEntry, CacheStats
from carousel.reviews.cache.sizing import estimate_size
from carousel.reviews.cache.sweeper import (
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    ExpirySweeper,
)
from carousel.reviews.core.config import MAX_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_TTL_SECONDS = MAX_CACHE_TTL_SECONDS

# Eviction brings usage back under this share of the memory ceiling.
SOFT_LIMIT_RATIO = 0.8

_BYTES_PER_MB = 1024 * 1024


def effective_ttl(ttl_seconds: Optional[float], default_ttl: float) -> float:
    """Clamp a requested TTL; missing or non-positive values use the default."""
    if ttl_seconds is None or ttl_seconds <= 0:
        ttl_seconds = default_ttl
    return min(ttl_seconds, MAX_TTL_SECONDS)


class MemoryCache(Generic[T]):
    """In-process TTL cache bounded by item count and estimated memory.

    Entries expire lazily on read and through a periodic background sweep.
    Under count or memory pressure the least recently accessed entries are
    evicted, at least a quarter of the store at a time.

    All access to the entry map and the memory counter goes through one
    re-entrant lock, shared with the sweeper thread.
    """

    def __init__(
        self,
        default_ttl_seconds: float = MAX_TTL_SECONDS,
        max_items: int = 1000,
        max_memory_mb: float = 50,
        sweep_interval_seconds: Optional[float] = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_items < 1:
            raise ValueError("max_items must be >= 1")
        if max_memory_mb <= 0:
            raise ValueError("max_memory_mb must be > 0")

        self._default_ttl = effective_ttl(default_ttl_seconds, MAX_TTL_SECONDS)
        self._max_items = max_items
        self._max_memory_mb = max_memory_mb
        self._clock = clock

        self._entries: Dict[str, CacheEntry[T]] = {}
        self._memory_usage = 0
        self._lock = threading.RLock()
        self._sweep_lock = threading.Lock()
        self._access_seq = itertools.count(1)

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

        self._sweeper: Optional[ExpirySweeper] = None
        if sweep_interval_seconds:
            self._sweeper = ExpirySweeper(self, sweep_interval_seconds)
            self._sweeper.start()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def default_ttl_seconds(self) -> float:
        return self._default_ttl

    @property
    def max_items(self) -> int:
        return self._max_items

    @property
    def max_memory_mb(self) -> float:
        return self._max_memory_mb

    @property
    def soft_limit_bytes(self) -> float:
        return self._max_memory_mb * _BYTES_PER_MB * SOFT_LIMIT_RATIO

    @property
    def memory_usage_bytes(self) -> int:
        with self._lock:
            return self._memory_usage

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_running

    def memory_usage_mb(self) -> float:
        return self.memory_usage_bytes / _BYTES_PER_MB

    # ------------------------------------------------------------------
    # Store operations
    # ------------------------------------------------------------------

    def set(self, key: str, value: T, ttl_seconds: Optional[float] = None) -> None:
        size = estimate_size(value)

        with self._lock:
            now = self._clock()

            # the old value is replaced either way, drop it before measuring pressure
            self._remove(key)

            if len(self._entries) >= self._max_items or not self._is_under_soft_limit(
                incoming=size
            ):
                self._evict_lru(incoming=size)

            self._entries[key] = CacheEntry(
                key=key,
                value=value,
                created_at=now,
                last_accessed_at=now,
                ttl_seconds=effective_ttl(ttl_seconds, self._default_ttl),
                size_bytes=size,
                access_seq=next(self._access_seq),
            )
            self._memory_usage += size

        if size >= self.soft_limit_bytes:
            logger.warning(
                "Cache entry %s (%d bytes) alone exceeds the soft memory limit",
                key,
                size,
            )

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._lookup(key)
            if entry is None:
                return default
            return entry.value

    def has(self, key: str) -> bool:
        with self._lock:
            return self._lookup(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._remove(key) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._memory_usage = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    # ------------------------------------------------------------------
    # Expiry sweep
    # ------------------------------------------------------------------

    def sweep(self) -> int:
        """Remove expired entries, then evict if memory is still over the soft limit.

        Returns the number of expired entries removed. A sweep requested while
        another one runs returns 0 without doing anything.
        """
        if not self._sweep_lock.acquire(blocking=False):
            logger.debug("Cache sweep already in progress, skipping")
            return 0
        try:
            with self._lock:
                now = self._clock()
                removed = 0
                for key, entry in list(self._entries.items()):
                    try:
                        if entry.is_expired(now):
                            self._remove(key)
                            removed += 1
                    except Exception:
                        logger.exception("Failed to sweep cache entry %s", key)

                self._expirations += removed

                if not self._is_under_soft_limit():
                    self._evict_lru()

                stats = self._stats()

            logger.info(
                "Cache cleanup complete: %d expired items removed, "
                "%d items remaining, %.2fMB used",
                removed,
                stats.items,
                stats.memory_usage_mb,
            )
            return removed
        finally:
            self._sweep_lock.release()

    # ------------------------------------------------------------------
    # Stats & lifecycle
    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        with self._lock:
            return self._stats()

    def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.stop()
        self.clear()

    def __enter__(self) -> "MemoryCache[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals, callers hold self._lock
    # ------------------------------------------------------------------

    def _lookup(self, key: str) -> Optional[CacheEntry[T]]:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        now = self._clock()
        if entry.is_expired(now):
            self._remove(key)
            self._expirations += 1
            self._misses += 1
            return None

        entry.touch(now, next(self._access_seq))
        self._hits += 1
        return entry

    def _remove(self, key: str) -> Optional[CacheEntry[T]]:
        entry = self._entries.pop(key, None)
        if entry is not None:
            self._memory_usage -= entry.size_bytes
        return entry

    def _is_under_soft_limit(self, incoming: int = 0) -> bool:
        return self._memory_usage + incoming < self.soft_limit_bytes

    def _evict_lru(self, incoming: int = 0) -> int:
        victims = lru_order(self._entries.values())
        quota = eviction_quota(len(victims))

        removed = 0
        for entry in victims:
            if removed >= quota and self._is_under_soft_limit(incoming):
                break
            self._remove(entry.key)
            removed += 1

        self._evictions += removed
        logger.info(
            "Cache LRU eviction: removed %d items, %d remaining",
            removed,
            len(self._entries),
        )
        return removed

    def _stats(self) -> CacheStats:
        lookups = self._hits + self._misses
        return CacheStats(
            items=len(self._entries),
            memory_usage_mb=self._memory_usage / _BYTES_PER_MB,
            max_memory_mb=self._max_memory_mb,
            max_items=self._max_items,
            hit_rate=(self._hits / lookups) if lookups else 0.0,
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
            expirations=self._expirations,
        )
