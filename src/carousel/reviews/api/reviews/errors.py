from __future__ import annotations

from typing import Optional


class ReviewsError(Exception):
    """Base class for failures of the review data-fetch layer."""


class InvalidReviewsRequestError(ReviewsError):
    pass


class RateLimitExceededError(ReviewsError):
    def __init__(self, client_ip: str, retry_after: float):
        super().__init__(f"Rate limit exceeded for {client_ip}")
        self.client_ip = client_ip
        self.retry_after = retry_after


class UpstreamError(ReviewsError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
