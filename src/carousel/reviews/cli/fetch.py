# reviews/cli/fetch.py
"""
CLI command to fetch a normalized review page through the same cache and
upstream client the HTTP service uses.

`--repeat` issues the same request several times against a private cache,
which makes cache hits visible in the printed stats.
"""
from __future__ import annotations

import asyncio
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from carousel.reviews.api.dependencies import build_components
from carousel.reviews.api.reviews import (
    InvalidReviewsRequestError,
    ReviewsError,
    parse_params,
)
from carousel.reviews.cli.utils import setup_cli_logging, write_yaml_file
from carousel.reviews.core.config import settings

logger = logging.getLogger(__name__)


class SortChoice(str, Enum):
    latest = "latest"
    rating = "rating"


async def _fetch(params, repeat: int) -> tuple[dict, dict]:
    # no background sweeper for a short-lived command
    components = build_components(
        settings.model_copy(update={"cache_sweep_interval_seconds": 0})
    )
    try:
        data = None
        for _ in range(repeat):
            data = await components.service.fetch_reviews(params)
        return data.model_dump(), components.cache.stats().as_dict()
    finally:
        await components.aclose()


def fetch_cmd(
    domain: str = typer.Option(..., "--domain", "-d", help="Business domain."),
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(20, "--limit", min=1, max=100),
    rating: Optional[int] = typer.Option(None, "--rating", min=1, max=5),
    sort: SortChoice = typer.Option(SortChoice.latest, "--sort"),
    repeat: int = typer.Option(
        1, "--repeat", min=1, help="Repeat the request to exercise the cache."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the result as YAML instead of printing JSON."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    setup_cli_logging(verbose)

    try:
        params = parse_params(
            domain=domain, page=page, limit=limit, rating=rating, sort=sort.value
        )
    except InvalidReviewsRequestError as exc:
        typer.echo(f"Invalid parameters: {exc}", err=True)
        raise typer.Exit(code=2)

    try:
        data, stats = asyncio.run(_fetch(params, repeat))
    except ReviewsError as exc:
        typer.echo(f"Failed to fetch reviews: {exc}", err=True)
        raise typer.Exit(code=1)

    if output is not None:
        write_yaml_file(output, data)
        typer.echo(f"Wrote {len(data['reviews'])} reviews to {output}")
    else:
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))

    typer.echo(
        f"Cache: {stats['items']} items, {stats['hits']} hits, "
        f"{stats['misses']} misses, hit rate {stats['hit_rate']:.2f}",
        err=True,
    )
