# reviews/routes/reviews.py
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from carousel.reviews.api.dependencies import get_reviews_service
from carousel.reviews.api.reviews import (
    InvalidReviewsRequestError,
    RateLimitExceededError,
    ReviewsService,
    UpstreamError,
    client_ip_from_headers,
    parse_params,
)
from carousel.reviews.core.logging import logging
from carousel.reviews.schemas.reviews import NormalizedReviewsData

logger = logging.getLogger(__name__)

router = APIRouter()
tags = ["reviews"]


@router.get(
    "/api/reviews",
    response_model=NormalizedReviewsData,
    description="Normalized review page for a business domain",
    name="Reviews",
)
async def get_reviews(
    request: Request,
    domain: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    rating: Optional[int] = Query(None, ge=1, le=5),
    sort: Literal["latest", "rating"] = Query("latest"),
    service: ReviewsService = Depends(get_reviews_service),
):
    try:
        params = parse_params(
            domain=domain, page=page, limit=limit, rating=rating, sort=sort
        )
    except InvalidReviewsRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))

    client_ip = client_ip_from_headers(
        request.headers, fallback=request.client.host if request.client else None
    )

    try:
        return await service.fetch_reviews(params, client_ip=client_ip)
    except RateLimitExceededError as e:
        raise HTTPException(
            status_code=429,
            detail="Rate limit exceeded. Please try again later.",
            headers={"Retry-After": str(max(1, int(e.retry_after)))},
        )
    except UpstreamError as e:
        logger.error(f"Upstream failure for {params.domain}: {e}")
        raise HTTPException(
            status_code=502, detail="Error fetching data from external API"
        )
