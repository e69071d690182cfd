from __future__ import annotations

import math
from typing import Iterable, List

from carousel.reviews.cache.models import CacheEntry

# Share of the current entries removed by every eviction pass, at minimum.
EVICTION_FRACTION = 0.25


def eviction_quota(entry_count: int) -> int:
    """Minimum number of entries one LRU pass removes (never less than one)."""
    if entry_count <= 0:
        return 0
    return max(1, math.ceil(entry_count * EVICTION_FRACTION))


def lru_order(entries: Iterable[CacheEntry]) -> List[CacheEntry]:
    """Entries ordered least recently accessed first.

    Ordered by `last_accessed_at`, ties broken by `access_seq`; access counts
    and sizes never decide a victim.
    """
    return sorted(entries, key=lambda e: (e.last_accessed_at, e.access_seq))
