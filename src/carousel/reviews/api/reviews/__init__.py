from __future__ import annotations

from .client import ReviewsUpstreamClient
from .errors import (
    InvalidReviewsRequestError,
    RateLimitExceededError,
    ReviewsError,
    UpstreamError,
)
from .params import FetchReviewsParams, is_valid_domain, parse_params
from .rate_limit import RateLimiter, client_ip_from_headers
from .service import ReviewsService

__all__ = [
    "FetchReviewsParams",
    "InvalidReviewsRequestError",
    "RateLimitExceededError",
    "RateLimiter",
    "ReviewsError",
    "ReviewsService",
    "ReviewsUpstreamClient",
    "UpstreamError",
    "client_ip_from_headers",
    "is_valid_domain",
    "parse_params",
]
