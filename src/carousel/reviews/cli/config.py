# reviews/cli/config.py
from __future__ import annotations

import typer

from carousel.reviews.cache import MAX_TTL_SECONDS, SOFT_LIMIT_RATIO
from carousel.reviews.cli.utils import dump_yaml
from carousel.reviews.core.config import Settings, get_settings


def effective_cache_config(settings: Settings) -> dict:
    return {
        "backend": settings.cache_type,
        "ttl_seconds": settings.cache_ttl_seconds,
        "ttl_ceiling_seconds": MAX_TTL_SECONDS,
        "max_items": settings.cache_max_items,
        "max_memory_mb": settings.cache_max_memory_mb,
        "soft_limit_mb": settings.cache_max_memory_mb * SOFT_LIMIT_RATIO,
        "sweep_interval_seconds": settings.cache_sweep_interval_seconds,
        "upstream_url": settings.reviews_api_base_url,
        "rate_limit": {
            "max_requests": settings.rate_limit_max_requests,
            "window_seconds": settings.rate_limit_window_seconds,
        },
    }


def config_cmd():
    """Print the cache configuration resolved from the environment."""
    typer.echo(dump_yaml(effective_cache_config(get_settings())))
