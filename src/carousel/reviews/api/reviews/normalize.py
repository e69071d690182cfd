from __future__ import annotations

from datetime import datetime, timezone

from carousel.reviews.schemas.reviews import (
    NormalizedCompanyInfo,
    NormalizedPagination,
    NormalizedReview,
    NormalizedReviewsData,
    ReviewAuthor,
    UpstreamBusinessUnit,
    UpstreamReview,
    UpstreamReviewsResponse,
)

PROFILE_URL = "https://www.trustpilot.com/review/{}"
TITLE_MAX_LENGTH = 60
DEFAULT_PER_PAGE = 20


def smart_truncate(text: str, max_length: int) -> str:
    """Truncate at a word boundary when one is close to the limit."""
    if not text or len(text) <= max_length:
        return text
    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_review(review: UpstreamReview) -> NormalizedReview:
    consumer = review.consumer
    dates = review.dates

    title = review.title or (
        smart_truncate(review.text, TITLE_MAX_LENGTH) if review.text else "No title"
    )

    return NormalizedReview(
        id=review.id,
        title=title,
        content=review.text or "No content",
        author=ReviewAuthor(
            name=(consumer.displayName if consumer else None) or "Anonymous",
            avatar=(consumer.imageUrl if consumer else None) or None,
            location=(consumer.countryCode if consumer else None) or None,
        ),
        rating=review.rating or 0,
        date=(dates.publishedDate if dates else None) or _now_iso(),
        verified=bool(consumer and consumer.isVerified),
        helpful=review.likes or 0,
    )


def normalize_company(business_unit: UpstreamBusinessUnit) -> NormalizedCompanyInfo:
    return NormalizedCompanyInfo(
        name=business_unit.displayName
        or business_unit.identifyingName
        or "Unknown Company",
        domain=business_unit.websiteUrl or "",
        average_rating=business_unit.trustScore or 0,
        total_reviews=business_unit.numberOfReviews or 0,
        trustpilot_url=PROFILE_URL.format(business_unit.identifyingName or ""),
    )


def normalize_response(data: UpstreamReviewsResponse) -> NormalizedReviewsData:
    pagination = data.filters.pagination if data.filters else None

    if pagination is not None:
        normalized_pagination = NormalizedPagination(
            current_page=pagination.currentPage,
            total_pages=pagination.totalPages,
            total_reviews=pagination.totalCount,
            per_page=pagination.perPage,
        )
    else:
        normalized_pagination = NormalizedPagination(
            current_page=1,
            total_pages=1,
            total_reviews=len(data.reviews),
            per_page=DEFAULT_PER_PAGE,
        )

    return NormalizedReviewsData(
        reviews=[normalize_review(r) for r in data.reviews],
        pagination=normalized_pagination,
        company=normalize_company(data.businessUnit),
    )
