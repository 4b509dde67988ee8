"""
Shared configuration management for the story cache service.
"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="STORIES_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Upstream APIs
    search_api_url: str = "https://hn.algolia.com/api/v1"
    item_api_url: str = "https://hacker-news.firebaseio.com/v0"
    upstream_timeout_seconds: Optional[float] = Field(default=10.0, gt=0)

    # Listings and comments
    story_limit: int = Field(default=30, ge=1, le=500)
    max_comments: int = Field(default=40, ge=0)
    listing_source: Literal["search", "items"] = "search"

    # Fan-out
    fanout_concurrency: int = Field(default=10, ge=1)
    fanout_partial_results: bool = False

    # Cache
    cache_backend: Literal["memory", "redis", "none"] = "memory"
    cache_max_entries: int = Field(default=1024, ge=1)
    redis_url: str = "redis://localhost:6379/0"


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
