"""
Client for the item-graph API (id lists plus one call per item).
"""

from __future__ import annotations

from typing import List, Optional

from .upstream_client import UpstreamClient
from ..stories.models import Item


STORY_LIST_KINDS = ("top", "new")


class ItemApiClient:
    """Reads story id lists and individual items."""

    def __init__(self, base_url: str, upstream: UpstreamClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.upstream = upstream

    async def story_ids(self, kind: str) -> List[int]:
        """Ranked story ids for ``kind`` ("top" or "new")."""
        if kind not in STORY_LIST_KINDS:
            raise ValueError(f"kind must be one of {STORY_LIST_KINDS}, got {kind!r}")
        url = f"{self.base_url}/{kind}stories.json"
        return await self.upstream.fetch_json(url, List[int], api="items")

    async def item(self, item_id: int) -> Optional[Item]:
        """A single item, or None when upstream has no such id."""
        url = f"{self.base_url}/item/{item_id}.json"
        return await self.upstream.fetch_json(url, Optional[Item], api="items")
