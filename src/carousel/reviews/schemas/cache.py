from __future__ import annotations

from pydantic import BaseModel


class CacheStatsModel(BaseModel):
    items: int
    memory_usage_mb: float
    max_memory_mb: float
    max_items: int
    hit_rate: float
    hits: int
    misses: int
    evictions: int
    expirations: int
