# tests/conftest.py
from typing import Any, Dict, List, Optional

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from carousel.reviews.api.dependencies import build_components
from carousel.reviews.cache import MemoryCache
from carousel.reviews.core.config import Settings
from carousel.reviews.main import create_app

UPSTREAM_URL = "https://upstream.test/reviews"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_review(idx: int, **overrides: Any) -> Dict[str, Any]:
    review = {
        "id": f"review-{idx}",
        "filtered": False,
        "pending": False,
        "title": f"Great service {idx}",
        "text": f"Review body number {idx}",
        "rating": 5,
        "likes": idx,
        "source": "Organic",
        "language": "en",
        "dates": {
            "experiencedDate": "2024-05-01T00:00:00.000Z",
            "publishedDate": "2024-05-02T10:00:00.000Z",
            "updatedDate": None,
            "submittedDate": None,
        },
        "consumer": {
            "id": f"consumer-{idx}",
            "displayName": f"Customer {idx}",
            "imageUrl": f"https://img.test/{idx}.png",
            "numberOfReviews": 3,
            "countryCode": "GB",
            "hasImage": True,
            "isVerified": True,
        },
        "reply": None,
    }
    review.update(overrides)
    return review


def make_upstream_payload(
    reviews: Optional[List[Dict[str, Any]]] = None, **overrides: Any
) -> Dict[str, Any]:
    payload = {
        "domain": "example.com",
        "pageUrl": "https://www.trustpilot.com/review/example.com",
        "businessUnit": {
            "id": "bu-1",
            "displayName": "Example Ltd",
            "identifyingName": "example.com",
            "numberOfReviews": 1234,
            "trustScore": 4.6,
            "websiteUrl": "https://example.com",
            "stars": 4.5,
        },
        "reviews": reviews if reviews is not None else [make_review(i) for i in range(3)],
        "filters": {
            "hasActiveFilters": False,
            "totalNumberOfReviews": 1234,
            "totalNumberOfFilteredReviews": 1234,
            "pagination": {
                "currentPage": 1,
                "perPage": 20,
                "totalCount": 1234,
                "totalPages": 62,
            },
        },
    }
    payload.update(overrides)
    return payload


class UpstreamStub:
    """httpx.MockTransport handler recording the requests it serves."""

    def __init__(self, payload: Any = None, status_code: int = 200):
        self.payload = payload if payload is not None else make_upstream_payload()
        self.status_code = status_code
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    c = MemoryCache(
        default_ttl_seconds=1800,
        max_items=100,
        max_memory_mb=50,
        sweep_interval_seconds=None,
        clock=clock,
    )
    yield c
    c.close()


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def test_settings():
    return Settings(
        reviews_api_base_url=UPSTREAM_URL,
        cache_sweep_interval_seconds=0,
        rate_limit_max_requests=5,
        rate_limit_window_seconds=60,
    )


@pytest.fixture
async def components(test_settings, cache, upstream):
    comps = build_components(test_settings, cache=cache, transport=upstream.transport)
    yield comps
    await comps.aclose()


@pytest.fixture
async def client(components):
    app = create_app(use_lifespan=False, components=components)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c
