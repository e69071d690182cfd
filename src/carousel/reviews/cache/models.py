from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A single cached value plus the bookkeeping used for expiry and eviction.

    - created_at / last_accessed_at: readings of the cache clock (seconds)
    - ttl_seconds: effective TTL, already clamped to the global ceiling
    - access_seq: cache-wide counter value at insertion or last read, orders
      entries whose clock readings tie
    - access_count: successful reads, diagnostics only
    - size_bytes: estimate taken at insertion, never updated
    """

    key: str
    value: T
    created_at: float
    last_accessed_at: float
    ttl_seconds: float
    size_bytes: int
    access_count: int = 0
    access_seq: int = 0

    def age(self, now: float) -> float:
        return now - self.created_at

    def is_expired(self, now: float) -> bool:
        return self.age(now) > self.ttl_seconds

    def touch(self, now: float, seq: int) -> None:
        self.access_count += 1
        self.last_accessed_at = now
        self.access_seq = seq


@dataclass(frozen=True)
class CacheStats:
    items: int
    memory_usage_mb: float
    max_memory_mb: float
    max_items: int
    hit_rate: float
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "items": self.items,
            "memory_usage_mb": self.memory_usage_mb,
            "max_memory_mb": self.max_memory_mb,
            "max_items": self.max_items,
            "hit_rate": self.hit_rate,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
        }
