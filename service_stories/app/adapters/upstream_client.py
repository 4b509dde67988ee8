"""
Async JSON client for the public story APIs.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from shared.errors import UpstreamDecodeError, UpstreamFetchError
from shared.logging import get_logger
from shared.metrics import MetricsCollector


T = TypeVar("T")


class UpstreamClient:
    """Issues single-attempt GETs and decodes JSON bodies into typed shapes.

    One instance owns one ``httpx.AsyncClient`` so connections are pooled
    across the many item fetches a fan-out issues.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float] = 10.0,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.logger = get_logger("stories.upstream")
        self.metrics = metrics
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._adapters: Dict[Any, TypeAdapter] = {}

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def fetch_json(self, url: str, shape: Type[T], *, api: str = "upstream") -> T:
        """GET ``url`` and validate the JSON body against ``shape``."""
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            self.logger.error("Upstream request failed", url=url, error=str(exc))
            self._record(api, "transport_error")
            raise UpstreamFetchError(url, message=f"Failed to fetch {url}: {exc}") from exc

        if not response.is_success:
            self.logger.error(
                "Upstream returned non-success status",
                url=url,
                status_code=response.status_code,
            )
            self._record(api, "http_error")
            raise UpstreamFetchError(url, response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            self.logger.error("Upstream body is not valid JSON", url=url)
            self._record(api, "decode_error")
            raise UpstreamDecodeError(url, f"Invalid JSON from {url}") from exc

        try:
            value = self._adapter(shape).validate_python(data)
        except ValidationError as exc:
            self.logger.error(
                "Upstream body does not match expected shape",
                url=url,
                errors=exc.error_count(),
            )
            self._record(api, "decode_error")
            raise UpstreamDecodeError(url, f"Unexpected body shape from {url}") from exc

        self.logger.debug("Upstream fetch succeeded", url=url)
        self._record(api, "ok")
        return value

    def _adapter(self, shape: Any) -> TypeAdapter:
        adapter = self._adapters.get(shape)
        if adapter is None:
            adapter = TypeAdapter(shape)
            self._adapters[shape] = adapter
        return adapter

    def _record(self, api: str, outcome: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("upstream_requests_total", api=api, outcome=outcome)
