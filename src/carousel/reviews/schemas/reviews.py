# reviews/schemas/reviews.py
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Upstream payload (subset of the review provider's business unit page)
# ---------------------------------------------------------------------------


class UpstreamConsumer(BaseModel):
    id: Optional[str] = None
    displayName: Optional[str] = None
    imageUrl: Optional[str] = None
    numberOfReviews: Optional[int] = None
    countryCode: Optional[str] = None
    hasImage: bool = False
    isVerified: bool = False

    model_config = ConfigDict(extra="ignore")


class UpstreamDates(BaseModel):
    experiencedDate: Optional[str] = None
    publishedDate: Optional[str] = None
    updatedDate: Optional[str] = None
    submittedDate: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class UpstreamReview(BaseModel):
    id: str
    title: Optional[str] = None
    text: Optional[str] = None
    rating: Optional[int] = None
    likes: Optional[int] = None
    language: Optional[str] = None
    source: Optional[str] = None
    consumer: Optional[UpstreamConsumer] = None
    dates: Optional[UpstreamDates] = None
    reply: Optional[Any] = None

    model_config = ConfigDict(extra="ignore")


class UpstreamBusinessUnit(BaseModel):
    id: Optional[str] = None
    displayName: Optional[str] = None
    identifyingName: Optional[str] = None
    numberOfReviews: Optional[int] = None
    trustScore: Optional[float] = None
    websiteUrl: Optional[str] = None
    stars: Optional[float] = None

    model_config = ConfigDict(extra="ignore")


class UpstreamPagination(BaseModel):
    currentPage: int
    perPage: int
    totalCount: int
    totalPages: int

    model_config = ConfigDict(extra="ignore")


class UpstreamFilters(BaseModel):
    pagination: Optional[UpstreamPagination] = None
    totalNumberOfReviews: Optional[int] = None
    totalNumberOfFilteredReviews: Optional[int] = None

    model_config = ConfigDict(extra="ignore")


class UpstreamReviewsResponse(BaseModel):
    domain: Optional[str] = None
    businessUnit: UpstreamBusinessUnit
    reviews: List[UpstreamReview] = Field(default_factory=list)
    filters: Optional[UpstreamFilters] = None

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Normalized data served to the carousel
# ---------------------------------------------------------------------------


class ReviewAuthor(BaseModel):
    name: str
    avatar: Optional[str] = None
    location: Optional[str] = None


class ReviewReply(BaseModel):
    content: str
    date: str
    author: str


class NormalizedReview(BaseModel):
    id: str
    author: ReviewAuthor
    rating: int
    title: str
    content: str
    date: str
    verified: bool
    helpful: int = 0
    reply: Optional[ReviewReply] = None


class NormalizedCompanyInfo(BaseModel):
    name: str
    domain: str
    average_rating: float
    total_reviews: int
    trustpilot_url: str


class NormalizedPagination(BaseModel):
    current_page: int
    total_pages: int
    total_reviews: int
    per_page: int


class NormalizedReviewsData(BaseModel):
    reviews: List[NormalizedReview]
    pagination: NormalizedPagination
    company: NormalizedCompanyInfo
