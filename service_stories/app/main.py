"""
Story cache service: page data and comment threads behind an edge cache.
"""

from typing import Dict, Optional

import httpx
from fastapi import Path, Request

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config

from service_stories.app.adapters.upstream_client import UpstreamClient
from service_stories.app.caching.freshness import COMMENT_FRESHNESS, LISTING_FRESHNESS
from service_stories.app.caching.store import CacheStore, InMemoryCacheStore, RedisCacheStore
from service_stories.app.loader import StoryLoader
from service_stories.app.responses import CachedPayload, json_response


SERVICE_NAME = "stories"
SERVICE_PORT = 8000


def build_cache_store(config: ServiceConfig) -> Optional[CacheStore]:
    """Cache store for the configured backend, or None to run uncached."""
    if config.cache_backend == "redis":
        return RedisCacheStore(config.redis_url)
    if config.cache_backend == "memory":
        return InMemoryCacheStore(maxsize=config.cache_max_entries)
    return None


class StoriesService(BaseService):
    """Story cache service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(SERVICE_NAME, SERVICE_PORT, config or get_config(SERVICE_NAME, SERVICE_PORT))
        self.upstream = UpstreamClient(
            timeout=self.config.upstream_timeout_seconds,
            metrics=self.metrics,
            transport=transport,
        )
        self.cache_store = build_cache_store(self.config)
        self.loader = StoryLoader.from_config(
            self.config,
            self.upstream,
            self.cache_store,
            metrics=self.metrics,
        )

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.upstream.close()
            if isinstance(self.cache_store, RedisCacheStore):
                await self.cache_store.close()

        self._setup_story_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.stories_service = self

    def _setup_story_routes(self):
        """Set up page data and comment routes."""

        @self.app.get("/api/stories")
        async def get_front_page(request: Request):
            """Trending and newest story listings."""
            page = await self.loader.load_front_page(str(request.url))
            return json_response(CachedPayload.build(page, LISTING_FRESHNESS))

        @self.app.get("/api/comments/{story_id}")
        async def get_comments(request: Request, story_id: int = Path(..., ge=1)):
            """First-level live comments for a story."""
            comments = await self.loader.load_comments(str(request.url), story_id)
            return json_response(CachedPayload.build(comments, COMMENT_FRESHNESS))

    async def _check_dependencies(self) -> Dict[str, str]:
        """Report cache backend health."""
        if isinstance(self.cache_store, RedisCacheStore):
            healthy = await self.cache_store.ping()
            return {"cache": "ok" if healthy else "error"}
        return {"cache": self.config.cache_backend}


def create_app(config: Optional[ServiceConfig] = None, **kwargs):
    """Create FastAPI application."""
    service = StoriesService(config, **kwargs)
    return service.app


if __name__ == "__main__":
    service = StoriesService()
    service.run()
