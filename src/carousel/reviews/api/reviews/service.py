from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from carousel.reviews.api.reviews.client import ReviewsUpstreamClient
from carousel.reviews.api.reviews.errors import RateLimitExceededError, UpstreamError
from carousel.reviews.api.reviews.normalize import normalize_response
from carousel.reviews.api.reviews.params import FetchReviewsParams
from carousel.reviews.api.reviews.rate_limit import DEFAULT_CLIENT_IP, RateLimiter
from carousel.reviews.cache import MAX_TTL_SECONDS, ReviewsCache
from carousel.reviews.schemas.reviews import (
    NormalizedReviewsData,
    UpstreamReviewsResponse,
)

logger = logging.getLogger(__name__)


class ReviewsService:
    """Fetch normalized review pages, consulting the response cache first.

    A failing cache never fails a request: lookups degrade to misses and
    writes are skipped, so every call still reaches the upstream API.
    """

    def __init__(
        self,
        cache: ReviewsCache,
        client: ReviewsUpstreamClient,
        rate_limiter: Optional[RateLimiter] = None,
        ttl_seconds: float = MAX_TTL_SECONDS,
    ):
        self.cache = cache
        self.client = client
        self.rate_limiter = rate_limiter
        self.ttl_seconds = min(ttl_seconds, MAX_TTL_SECONDS)

    async def fetch_reviews(
        self, params: FetchReviewsParams, client_ip: str = DEFAULT_CLIENT_IP
    ) -> NormalizedReviewsData:
        if self.rate_limiter is not None:
            decision = self.rate_limiter.check(client_ip)
            if not decision.allowed:
                logger.warning("Rate limit exceeded for IP: %s", client_ip)
                raise RateLimitExceededError(client_ip, retry_after=decision.reset_in)

        cache_key = params.cache_key()

        cached = self._cache_get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for %s", cache_key)
            return cached

        payload = await self.client.fetch(params)
        try:
            upstream = UpstreamReviewsResponse.model_validate(payload)
        except ValidationError as e:
            logger.error("Upstream payload failed validation: %s", e.errors())
            raise UpstreamError("Upstream returned an invalid payload") from e

        data = normalize_response(upstream)
        self._cache_set(cache_key, data)
        return data

    def _cache_get(self, key: str) -> Optional[NormalizedReviewsData]:
        try:
            return self.cache.get(key)
        except Exception:
            logger.exception("Cache lookup failed for %s, treating as miss", key)
            return None

    def _cache_set(self, key: str, data: NormalizedReviewsData) -> None:
        try:
            self.cache.set(key, data, self.ttl_seconds)
            stats = self.cache.stats()
        except Exception:
            logger.exception("Cache write failed for %s", key)
            return

        logger.info(
            "Data cached with key %s (TTL %ss); cache stats: %d items, "
            "%.2fMB used (max: %sMB)",
            key,
            self.ttl_seconds,
            stats.items,
            stats.memory_usage_mb,
            stats.max_memory_mb,
        )
