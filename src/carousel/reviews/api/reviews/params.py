from __future__ import annotations

import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from carousel.reviews.api.reviews.errors import InvalidReviewsRequestError

CACHE_KEY_PREFIX = "trustpilot"

_DOMAIN_RE = re.compile(
    r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?(\.[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)*$",
    re.IGNORECASE,
)

SortOrder = Literal["latest", "rating"]


def normalize_domain(domain: str) -> str:
    return domain.strip().lower()


def is_valid_domain(domain: str) -> bool:
    if not domain or not isinstance(domain, str):
        return False
    return _DOMAIN_RE.match(domain) is not None


class FetchReviewsParams(BaseModel):
    domain: str = Field(min_length=1)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    sort: SortOrder = "latest"

    @field_validator("domain")
    @classmethod
    def domain_is_hostname(cls, v: str) -> str:
        v = normalize_domain(v)
        if not is_valid_domain(v):
            raise ValueError(f"Invalid domain: {v!r}")
        return v

    def cache_key(self) -> str:
        """Deterministic key: equal parameters always give the same key."""
        rating = self.rating if self.rating is not None else "all"
        return (
            f"{CACHE_KEY_PREFIX}:{self.domain}:{self.page}:{self.limit}"
            f":{rating}:{self.sort}"
        )


def parse_params(**raw) -> FetchReviewsParams:
    """Validate raw request values, raising InvalidReviewsRequestError on failure."""
    try:
        return FetchReviewsParams(**{k: v for k, v in raw.items() if v is not None})
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidReviewsRequestError(messages) from e
