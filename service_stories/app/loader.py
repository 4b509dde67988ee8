"""
Page-data and comment loaders built on the cache-aside pipeline.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from shared.config import BaseConfig
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .adapters.item_client import ItemApiClient
from .adapters.search_client import SearchApiClient
from .adapters.upstream_client import UpstreamClient
from .caching.cache_aside import CacheAside
from .caching.freshness import COMMENT_FRESHNESS, LISTING_FRESHNESS
from .caching.keys import build_key
from .caching.store import CacheStore
from .stories.fanout import DEFAULT_CONCURRENCY, MAX_COMMENTS, fetch_comments
from .stories.listings import ItemGraphListing, ListingStrategy, SearchListing
from .stories.models import Comment, FrontPage, Story


class StoryLoader:
    """Loads trending/newest listings and comment threads through the cache."""

    def __init__(
        self,
        listings: Dict[str, ListingStrategy],
        item_client: ItemApiClient,
        cache: CacheAside,
        *,
        max_comments: int = MAX_COMMENTS,
        concurrency: int = DEFAULT_CONCURRENCY,
        partial: bool = False,
    ) -> None:
        self.listings = listings
        self.item_client = item_client
        self.cache = cache
        self.max_comments = max_comments
        self.concurrency = concurrency
        self.partial = partial
        self.logger = get_logger("stories.loader")

    @classmethod
    def from_config(
        cls,
        config: BaseConfig,
        upstream: UpstreamClient,
        store: Optional[CacheStore],
        *,
        metrics: Optional[MetricsCollector] = None,
    ) -> "StoryLoader":
        """Wire clients and listing strategies from service configuration."""
        item_client = ItemApiClient(config.item_api_url, upstream)

        listings: Dict[str, ListingStrategy]
        if config.listing_source == "items":
            listings = {
                kind: ItemGraphListing(
                    item_client,
                    kind,
                    limit=config.story_limit,
                    concurrency=config.fanout_concurrency,
                    partial=config.fanout_partial_results,
                )
                for kind in ("top", "new")
            }
        else:
            search_client = SearchApiClient(config.search_api_url, upstream)
            listings = {
                kind: SearchListing(search_client, kind, limit=config.story_limit)
                for kind in ("top", "new")
            }

        return cls(
            listings,
            item_client,
            CacheAside(store, metrics=metrics),
            max_comments=config.max_comments,
            concurrency=config.fanout_concurrency,
            partial=config.fanout_partial_results,
        )

    async def load_listing(self, identity: str, kind: str) -> List[Story]:
        """Stories for ``kind`` ("top" or "new")."""
        strategy = self.listings.get(kind)
        if strategy is None:
            raise ValueError(f"Unknown listing kind: {kind!r}")

        return await self.cache.load(
            build_key(identity, kind),
            strategy.fetch,
            LISTING_FRESHNESS,
            Story,
            resource=f"listing_{kind}",
        )

    async def load_front_page(self, identity: str) -> FrontPage:
        """Trending and newest listings, loaded concurrently."""
        trending, newest = await asyncio.gather(
            self.load_listing(identity, "top"),
            self.load_listing(identity, "new"),
        )
        self.logger.debug("Front page loaded", trending=len(trending), newest=len(newest))
        return FrontPage(trending=trending, newest=newest)

    async def load_comments(self, identity: str, story_id: int) -> List[Comment]:
        """Live first-level comments for ``story_id``."""

        async def _fetch() -> List[Comment]:
            return await fetch_comments(
                self.item_client,
                story_id,
                limit=self.max_comments,
                concurrency=self.concurrency,
                partial=self.partial,
            )

        return await self.cache.load(
            build_key(identity, str(story_id)),
            _fetch,
            COMMENT_FRESHNESS,
            Comment,
            resource="comments",
        )
