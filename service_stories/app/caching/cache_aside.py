"""
Cache-aside loading of normalized collections.
"""

from __future__ import annotations

import time
from contextlib import nullcontext
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .freshness import FreshnessPolicy
from .store import CacheStore, CachedResponse


M = TypeVar("M", bound=BaseModel)


class CacheAside:
    """
    Check the store, fetch on miss, write back, return.

    Upstream errors raised by ``fetch`` are never caught here. Store errors
    are logged and degrade to a miss (on read) or a skipped write. Concurrent
    misses for the same key are not coalesced; each one fetches upstream and
    the last write wins.
    """

    def __init__(
        self,
        store: Optional[CacheStore],
        *,
        metrics: Optional[MetricsCollector] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.metrics = metrics
        self._clock = clock
        self.logger = get_logger("stories.cache")
        self._adapters: Dict[Any, TypeAdapter] = {}

    async def load(
        self,
        key: str,
        fetch: Callable[[], Awaitable[List[M]]],
        freshness: FreshnessPolicy,
        model: Type[M],
        *,
        resource: str = "collection",
    ) -> List[M]:
        """Return the collection cached under ``key``, fetching it on a miss."""
        cached = await self._lookup(key, model, resource)
        if cached is not None:
            return cached

        timer = (
            self.metrics.time_operation("fanout_duration_seconds", resource=resource)
            if self.metrics
            else nullcontext()
        )
        with timer:
            items = await fetch()

        await self._store(key, items, freshness, model)
        return items

    async def _lookup(self, key: str, model: Type[M], resource: str) -> Optional[List[M]]:
        if self.store is None:
            self._record(resource, "miss")
            return None

        try:
            response = await self.store.match(key)
        except Exception as exc:
            self.logger.error("Cache fetch error", key=key, error=str(exc))
            self._record(resource, "error")
            return None

        if response is None:
            self.logger.debug("Cache miss", key=key, resource=resource)
            self._record(resource, "miss")
            return None

        try:
            items = self._adapter(model).validate_json(response.body)
        except ValidationError:
            self.logger.warning("Discarding malformed cache payload", key=key)
            self._record(resource, "error")
            return None

        now = self._clock()
        if response.is_stale(now):
            self.logger.info("Serving stale cache entry", key=key, age=round(response.age(now), 1))
            self._record(resource, "stale")
        else:
            self._record(resource, "hit")
        return items

    async def _store(self, key: str, items: List[M], freshness: FreshnessPolicy, model: Type[M]) -> None:
        if self.store is None:
            return

        response = CachedResponse(
            body=self._adapter(model).dump_json(items).decode("utf-8"),
            stored_at=self._clock(),
            headers={
                "content-type": "application/json",
                "cache-control": freshness.cache_control(),
            },
        )
        try:
            await self.store.put(key, response.clone())
        except Exception as exc:
            self.logger.error("Cache write error", key=key, error=str(exc))
            return
        self.logger.debug("Cached collection", key=key, count=len(items), max_age=freshness.max_age)

    def _adapter(self, model: Type[M]) -> TypeAdapter:
        adapter = self._adapters.get(model)
        if adapter is None:
            adapter = TypeAdapter(List[model])
            self._adapters[model] = adapter
        return adapter

    def _record(self, resource: str, result: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("cache_lookups_total", resource=resource, result=result)
