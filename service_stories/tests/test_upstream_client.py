"""
Tests for the upstream JSON client and the typed API wrappers.
"""

from typing import List

import httpx
import pytest

from service_stories.app.adapters.item_client import ItemApiClient
from service_stories.app.adapters.search_client import SearchApiClient
from service_stories.app.adapters.upstream_client import UpstreamClient
from service_stories.app.stories.models import Item, SearchResponse
from shared.errors import ExternalServiceError, UpstreamDecodeError, UpstreamFetchError
from shared.test_helpers import (
    ITEM_BASE,
    SEARCH_BASE,
    FakeUpstream,
    front_page_url,
    item_url,
    latest_url,
    story_data_factory,
    story_list_url,
)


def _client(upstream: FakeUpstream) -> UpstreamClient:
    return UpstreamClient(transport=upstream.transport())


class TestUpstreamClient:
    """Test cases for UpstreamClient.fetch_json."""

    @pytest.mark.asyncio
    async def test_decodes_typed_shape(self):
        upstream = FakeUpstream({story_list_url("top"): [3, 1, 2]})
        client = _client(upstream)

        ids = await client.fetch_json(story_list_url("top"), List[int])

        assert ids == [3, 1, 2]
        assert upstream.calls == [story_list_url("top")]
        await client.close()

    @pytest.mark.asyncio
    async def test_non_success_status_raises_fetch_error(self):
        url = item_url(1)
        upstream = FakeUpstream({url: httpx.Response(503, text="unavailable")})
        client = _client(upstream)

        with pytest.raises(UpstreamFetchError) as exc_info:
            await client.fetch_json(url, Item)

        assert exc_info.value.status_code == 503
        assert exc_info.value.url == url
        assert exc_info.value.code == "UPSTREAM_FETCH_ERROR"
        assert isinstance(exc_info.value, ExternalServiceError)
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_route_is_a_fetch_error(self):
        client = _client(FakeUpstream())

        with pytest.raises(UpstreamFetchError) as exc_info:
            await client.fetch_json(item_url(9), Item)

        assert exc_info.value.status_code == 404
        await client.close()

    @pytest.mark.asyncio
    async def test_invalid_json_raises_decode_error(self):
        url = item_url(1)
        client = _client(FakeUpstream({url: b"{not json"}))

        with pytest.raises(UpstreamDecodeError) as exc_info:
            await client.fetch_json(url, Item)

        assert exc_info.value.code == "UPSTREAM_DECODE_ERROR"
        await client.close()

    @pytest.mark.asyncio
    async def test_wrong_shape_raises_decode_error(self):
        url = story_list_url("new")
        client = _client(FakeUpstream({url: {"unexpected": "object"}}))

        with pytest.raises(UpstreamDecodeError):
            await client.fetch_json(url, List[int])
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_failure_raises_fetch_error(self):
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = UpstreamClient(transport=httpx.MockTransport(_refuse))

        with pytest.raises(UpstreamFetchError) as exc_info:
            await client.fetch_json(item_url(1), Item)

        assert exc_info.value.status_code is None
        await client.close()

    @pytest.mark.asyncio
    async def test_non_numeric_search_id_raises_decode_error(self):
        hit = story_data_factory.search_hit(1)
        hit["objectID"] = "not-a-number"
        url = front_page_url()
        client = _client(FakeUpstream({url: story_data_factory.search_response([hit])}))

        with pytest.raises(UpstreamDecodeError):
            await client.fetch_json(url, SearchResponse)
        await client.close()

    @pytest.mark.asyncio
    async def test_single_attempt_per_call(self):
        url = item_url(1)
        upstream = FakeUpstream({url: httpx.Response(500)})
        client = _client(upstream)

        with pytest.raises(UpstreamFetchError):
            await client.fetch_json(url, Item)

        assert len(upstream.calls) == 1
        await client.close()


class TestApiClients:
    """Test cases for the search and item API wrappers."""

    @pytest.mark.asyncio
    async def test_search_endpoints(self):
        upstream = FakeUpstream({
            front_page_url(5): story_data_factory.search_response([story_data_factory.search_hit(1)]),
            latest_url(5): story_data_factory.search_response([]),
        })
        client = SearchApiClient(SEARCH_BASE + "/", _client(upstream))

        front = await client.front_page(5)
        latest = await client.latest_stories(5)

        assert isinstance(front, SearchResponse)
        assert front.hits[0].objectID == 1
        assert latest.hits == []
        assert upstream.calls == [front_page_url(5), latest_url(5)]

    @pytest.mark.asyncio
    async def test_item_endpoints(self):
        upstream = FakeUpstream({
            story_list_url("new"): [100, 101],
            item_url(100): {"id": 100, "title": "A", "time": 1000},
            item_url(101): None,
        })
        client = ItemApiClient(ITEM_BASE, _client(upstream))

        assert await client.story_ids("new") == [100, 101]
        item = await client.item(100)
        assert item.title == "A"
        assert item.kids is None
        assert await client.item(101) is None

    @pytest.mark.asyncio
    async def test_item_client_rejects_unknown_list(self):
        client = ItemApiClient(ITEM_BASE, _client(FakeUpstream()))

        with pytest.raises(ValueError):
            await client.story_ids("best")
