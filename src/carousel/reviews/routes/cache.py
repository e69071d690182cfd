# reviews/routes/cache.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from carousel.reviews.api.dependencies import get_cache
from carousel.reviews.cache import ReviewsCache
from carousel.reviews.schemas.cache import CacheStatsModel

router = APIRouter()
tags = ["cache"]


@router.get(
    "/cache/stats",
    response_model=CacheStatsModel,
    description="Health of the in-process response cache",
    name="Cache stats",
)
async def cache_stats(cache: ReviewsCache = Depends(get_cache)):
    return CacheStatsModel(**cache.stats().as_dict())
