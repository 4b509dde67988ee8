"""
Response assembly: attach cache-control to loader results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .caching.freshness import FreshnessPolicy


@dataclass(frozen=True)
class CachedPayload:
    """A loader result plus the cache-control directive to propagate."""

    data: Union[BaseModel, List[BaseModel]]
    cache_control: str

    @classmethod
    def build(cls, data: Union[BaseModel, List[BaseModel]], freshness: FreshnessPolicy) -> "CachedPayload":
        return cls(data=data, cache_control=freshness.cache_control())

    def headers(self) -> dict:
        return {"cache-control": self.cache_control}

    def content(self) -> Any:
        return jsonable_encoder(self.data)


def json_response(payload: CachedPayload, status_code: int = 200) -> JSONResponse:
    """Render a payload as JSON with its cache-control header."""
    return JSONResponse(content=payload.content(), status_code=status_code, headers=payload.headers())
