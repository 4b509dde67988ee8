"""
Cache stores holding serialized responses keyed by cache key.

The service only needs ``match`` and ``put``. Stores expire entries
themselves from the response's cache-control header; nothing in the
service invalidates entries explicitly.
"""

from __future__ import annotations

import json
import re
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Protocol

import redis.asyncio as redis
from cachetools import TLRUCache
from redis.exceptions import RedisError

from shared.logging import get_logger


DEFAULT_MAX_ENTRIES = 1024

_DIRECTIVE = re.compile(r"([a-z-]+)(?:=(\d+))?")


def parse_cache_control(header: str) -> Dict[str, Optional[int]]:
    """Parse a cache-control header into ``{directive: seconds-or-None}``."""
    directives: Dict[str, Optional[int]] = {}
    for part in header.lower().split(","):
        match = _DIRECTIVE.fullmatch(part.strip())
        if match:
            name, value = match.groups()
            directives[name] = int(value) if value is not None else None
    return directives


@dataclass
class CachedResponse:
    """A serialized response body plus headers, as held by a cache store."""

    body: str
    headers: Dict[str, str] = field(default_factory=dict)
    stored_at: float = field(default_factory=time.time)

    @property
    def max_age(self) -> int:
        directives = parse_cache_control(self.headers.get("cache-control", ""))
        shared_max_age = directives.get("s-maxage")
        if shared_max_age is not None:
            return shared_max_age
        return directives.get("max-age") or 0

    @property
    def stale_while_revalidate(self) -> int:
        directives = parse_cache_control(self.headers.get("cache-control", ""))
        return directives.get("stale-while-revalidate") or 0

    @property
    def retention_seconds(self) -> int:
        """How long a store may keep the entry at all."""
        return self.max_age + self.stale_while_revalidate

    def age(self, now: Optional[float] = None) -> float:
        return (time.time() if now is None else now) - self.stored_at

    def is_stale(self, now: Optional[float] = None) -> bool:
        return self.age(now) > self.max_age

    def clone(self) -> "CachedResponse":
        return CachedResponse(body=self.body, headers=dict(self.headers), stored_at=self.stored_at)

    def to_json(self) -> str:
        return json.dumps({"body": self.body, "headers": self.headers, "stored_at": self.stored_at})

    @classmethod
    def from_json(cls, payload: str) -> "CachedResponse":
        data = json.loads(payload)
        return cls(
            body=data["body"],
            headers=dict(data.get("headers") or {}),
            stored_at=float(data.get("stored_at", 0.0)),
        )


class CacheStore(Protocol):
    """Opaque key to response store supplied by the hosting platform."""

    async def match(self, key: str) -> Optional[CachedResponse]:
        ...

    async def put(self, key: str, value: CachedResponse) -> None:
        ...


def _expires_at(key: str, value: CachedResponse, now: float) -> float:
    return value.stored_at + value.retention_seconds


class InMemoryCacheStore:
    """
    Process-local store backed by a bounded TLRU cache.

    An entry expires ``max-age + stale-while-revalidate`` seconds after its
    ``stored_at``. Once ``maxsize`` entries are held the least recently used
    one is evicted.
    """

    def __init__(self, maxsize: int = DEFAULT_MAX_ENTRIES, clock: Callable[[], float] = time.time) -> None:
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_expires_at, timer=clock)

    async def match(self, key: str) -> Optional[CachedResponse]:
        self._cache.expire()
        entry = self._cache.get(key)
        if entry is None:
            return None
        return entry.clone()

    async def put(self, key: str, value: CachedResponse) -> None:
        self._cache[key] = value.clone()

    def __len__(self) -> int:
        return len(self._cache)


class RedisCacheStore:
    """Redis-backed store; Redis expires keys after max-age + stale-while-revalidate."""

    def __init__(self, redis_url: str) -> None:
        self.redis_url = redis_url
        self.logger = get_logger("stories.cache.redis")
        self._redis = redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )

    async def close(self) -> None:
        """Close Redis connections."""
        await self._redis.aclose()

    async def ping(self) -> bool:
        """Return True when Redis responds to a ping."""
        try:
            return bool(await self._redis.ping())
        except RedisError as exc:
            self.logger.error("Redis health check failed", error=str(exc))
            return False

    async def match(self, key: str) -> Optional[CachedResponse]:
        value = await self._redis.get(key)
        if not value:
            return None
        return CachedResponse.from_json(value)

    async def put(self, key: str, value: CachedResponse) -> None:
        ttl = max(1, value.retention_seconds)
        await self._redis.set(key, value.to_json(), ex=ttl)
