"""
Client for the story search API (index-backed listings).
"""

from __future__ import annotations

from .upstream_client import UpstreamClient
from ..stories.models import SearchResponse


class SearchApiClient:
    """Ranked and date-sorted story searches; each call returns ready-made hits."""

    def __init__(self, base_url: str, upstream: UpstreamClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.upstream = upstream

    async def front_page(self, limit: int) -> SearchResponse:
        """Stories currently on the front page, in rank order."""
        url = f"{self.base_url}/search?tags=front_page&hitsPerPage={limit}"
        return await self.upstream.fetch_json(url, SearchResponse, api="search")

    async def latest_stories(self, limit: int) -> SearchResponse:
        """Most recently submitted stories, newest first."""
        url = f"{self.base_url}/search_by_date?tags=story&hitsPerPage={limit}"
        return await self.upstream.fetch_json(url, SearchResponse, api="search")
