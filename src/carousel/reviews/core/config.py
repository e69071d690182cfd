# reviews/core/config.py
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Absolute ceiling for any cached entry, whatever the environment says.
MAX_CACHE_TTL_SECONDS = 1800


class Settings(BaseSettings):
    app_name: str = "Reviews Carousel API"
    env: Literal["dev", "prod", "test"] = "dev"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =============================================================================
    # Upstream review API
    # =============================================================================

    reviews_api_base_url: str = Field(
        default="https://api.trustpilot.com",
        validation_alias=AliasChoices("reviews_api_base_url", "external_api_base_url"),
        description="Base URL of the upstream review data API",
    )
    reviews_api_timeout: float = Field(
        default=10.0, description="Upstream request timeout in seconds"
    )
    reviews_api_user_agent: str = "ReviewsCarousel/1.0.0"

    # =============================================================================
    # Response cache
    # =============================================================================

    # Only "memory" is implemented, "redis" fails at startup
    cache_type: Literal["memory", "redis"] = Field(
        default="memory", description="Cache backend selector"
    )
    cache_ttl_seconds: int = Field(
        default=MAX_CACHE_TTL_SECONDS,
        description="Cache TTL in seconds (capped at 1800)",
    )
    cache_max_items: int = Field(default=1000, description="Maximum cache entries")
    cache_max_memory_mb: float = Field(
        default=50, description="Maximum estimated cache memory in MB"
    )
    cache_sweep_interval_seconds: float = Field(
        default=120, description="Interval of the background expiry sweep"
    )

    # =============================================================================
    # Rate limiting & CORS
    # =============================================================================

    rate_limit_window_seconds: float = Field(
        default=60, description="Fixed rate limit window per client IP"
    )
    rate_limit_max_requests: int = Field(
        default=30, description="Requests allowed per window per client IP"
    )

    allowed_origins: str = Field(
        default="*", description="Comma separated list of CORS origins"
    )

    @field_validator("cache_ttl_seconds")
    @classmethod
    def clamp_cache_ttl(cls, v: int) -> int:
        return max(1, min(v, MAX_CACHE_TTL_SECONDS))

    @field_validator("cache_max_items")
    @classmethod
    def positive_max_items(cls, v: int) -> int:
        if v < 1:
            raise ValueError("cache_max_items must be >= 1")
        return v

    @property
    def allowed_origins_list(self) -> list[str]:
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return origins or ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
