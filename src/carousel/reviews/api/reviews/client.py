from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from carousel.reviews.api.reviews.errors import UpstreamError
from carousel.reviews.api.reviews.params import FetchReviewsParams

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "ReviewsCarousel/1.0.0"


def build_query(params: FetchReviewsParams) -> Dict[str, str]:
    query = {"domain": params.domain}
    if params.page > 1:
        query["page"] = str(params.page)
    query["limit"] = str(params.limit)
    if params.rating is not None:
        query["rating"] = str(params.rating)
    query["sort"] = params.sort
    return query


class ReviewsUpstreamClient:
    """Thin async client for the upstream review data API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._url = base_url
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json", "User-Agent": user_agent},
        )
        logger.debug(f"Upstream reviews URL {self._url}")

    async def fetch(self, params: FetchReviewsParams) -> Dict[str, Any]:
        query = build_query(params)
        logger.info("Requesting upstream reviews for %s", params.domain)

        try:
            resp = await self._client.get(self._url, params=query)
        except httpx.TimeoutException as e:
            logger.error(f"Upstream timeout for {params.domain}: {e}")
            raise UpstreamError("Upstream request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Upstream connection error {e}")
            raise UpstreamError("Upstream connection error") from e

        if resp.is_error:
            logger.error(
                "Upstream request failed",
                extra={"status": resp.status_code, "body": resp.text[:500]},
            )
            raise UpstreamError(
                f"Upstream returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Upstream returned invalid JSON", extra={"body": resp.text[:500]})
            raise UpstreamError("Upstream returned invalid JSON") from e

        if not isinstance(data, dict):
            raise UpstreamError("Upstream returned an unexpected payload")

        logger.debug(
            "Fetched %d reviews for %s", len(data.get("reviews") or []), params.domain
        )
        return data

    async def aclose(self) -> None:
        await self._client.aclose()
