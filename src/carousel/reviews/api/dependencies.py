from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Request

from carousel.reviews.api.reviews.client import ReviewsUpstreamClient
from carousel.reviews.api.reviews.rate_limit import RateLimiter
from carousel.reviews.api.reviews.service import ReviewsService
from carousel.reviews.cache import ReviewsCache, create_cache_from_settings
from carousel.reviews.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class ReviewsComponents:
    """Objects built once per process and shared by every request."""

    cache: ReviewsCache
    client: ReviewsUpstreamClient
    service: ReviewsService

    async def aclose(self) -> None:
        await self.client.aclose()
        self.cache.close()
        logger.debug("Reviews components closed")


def build_components(
    settings: Settings,
    cache: Optional[ReviewsCache] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ReviewsComponents:
    # raises for unimplemented backends before anything else is created
    cache = cache if cache is not None else create_cache_from_settings(settings)

    client = ReviewsUpstreamClient(
        base_url=settings.reviews_api_base_url,
        timeout=settings.reviews_api_timeout,
        user_agent=settings.reviews_api_user_agent,
        transport=transport,
    )
    rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    service = ReviewsService(
        cache=cache,
        client=client,
        rate_limiter=rate_limiter,
        ttl_seconds=settings.cache_ttl_seconds,
    )
    return ReviewsComponents(cache=cache, client=client, service=service)


def get_components(request: Request) -> ReviewsComponents:
    return request.app.state.reviews


def get_cache(request: Request) -> ReviewsCache:
    return get_components(request).cache


def get_reviews_service(request: Request) -> ReviewsService:
    return get_components(request).service
