"""
Fetch strategies for the trending and newest story listings.

Each strategy is an awaitable ``fetch()`` returning ``List[Story]``; the
cache-aside loader does not care which upstream it talks to.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from shared.logging import get_logger

from ..adapters.item_client import ItemApiClient
from ..adapters.search_client import SearchApiClient
from .fanout import DEFAULT_CONCURRENCY, gather_ordered
from .models import Item, Story
from .normalizer import SourceShape, normalize_story


STORY_LIMIT = 30
LISTING_KINDS = ("top", "new")


class ListingStrategy(Protocol):
    """Anything that can produce an ordered story listing."""

    async def fetch(self) -> List[Story]:
        ...


class SearchListing:
    """One search call returns the ranked/sorted entries directly."""

    def __init__(self, client: SearchApiClient, kind: str, *, limit: int = STORY_LIMIT) -> None:
        if kind not in LISTING_KINDS:
            raise ValueError(f"kind must be one of {LISTING_KINDS}, got {kind!r}")
        self.client = client
        self.kind = kind
        self.limit = limit

    async def fetch(self) -> List[Story]:
        if self.kind == "top":
            response = await self.client.front_page(self.limit)
        else:
            response = await self.client.latest_stories(self.limit)
        return [normalize_story(hit, SourceShape.SEARCH) for hit in response.hits]


class ItemGraphListing:
    """An id list call followed by one concurrent fetch per id."""

    def __init__(
        self,
        client: ItemApiClient,
        kind: str,
        *,
        limit: int = STORY_LIMIT,
        concurrency: int = DEFAULT_CONCURRENCY,
        partial: bool = False,
    ) -> None:
        if kind not in LISTING_KINDS:
            raise ValueError(f"kind must be one of {LISTING_KINDS}, got {kind!r}")
        self.client = client
        self.kind = kind
        self.limit = limit
        self.concurrency = concurrency
        self.partial = partial
        self.logger = get_logger("stories.listings")

    async def fetch(self) -> List[Story]:
        ids = (await self.client.story_ids(self.kind))[: self.limit]
        items: List[Optional[Item]] = await gather_ordered(
            ids,
            self.client.item,
            concurrency=self.concurrency,
            partial=self.partial,
        )

        stories: List[Story] = []
        for item in items:
            # Upstream answers null for ids it no longer knows
            if item is None:
                continue
            stories.append(normalize_story(item, SourceShape.ITEM))

        if len(stories) < len(ids):
            self.logger.info(
                "Listing assembled with missing items",
                kind=self.kind,
                requested=len(ids),
                returned=len(stories),
            )
        return stories
