"""
End-to-end tests for the story service over a fake item-graph upstream.
"""

import pytest
from fastapi.testclient import TestClient

from service_stories.app.main import create_app
from shared.config import get_config
from shared.test_helpers import FakeUpstream, item_url, story_data_factory, story_list_url


class TestStoryFlow:
    """Page data and comment threads, from upstream to HTTP response."""

    @pytest.fixture
    def upstream(self):
        return FakeUpstream({
            story_list_url("top"): [101, 100],
            story_list_url("new"): [100, 101],
            item_url(100): {"id": 100, "title": "A", "time": 1000},
            item_url(101): {"id": 101, "kids": [200, 201, 202]},
            item_url(200): story_data_factory.comment_item(200),
            item_url(201): story_data_factory.comment_item(201, dead=True),
            item_url(202): story_data_factory.comment_item(202, text=None),
        })

    @pytest.fixture
    def client(self, upstream):
        config = get_config("stories", 8000, listing_source="items", cache_backend="memory")
        return TestClient(create_app(config, transport=upstream.transport()))

    def test_newest_listing(self, client):
        response = client.get("/api/stories")

        assert response.status_code == 200
        assert response.json()["newest"] == [
            {"id": 100, "title": "A", "by": None, "time": 1000, "score": None, "descendants": None, "url": None},
            {"id": 101, "title": "Untitled", "by": None, "time": None, "score": None, "descendants": None, "url": None},
        ]
        assert [story["id"] for story in response.json()["trending"]] == [101, 100]

    def test_repeat_visit_served_from_cache(self, client, upstream):
        first = client.get("/api/stories").json()
        calls = list(upstream.calls)

        second = client.get("/api/stories").json()

        assert first == second
        assert upstream.calls == calls

    def test_comment_thread(self, client, upstream):
        response = client.get("/api/comments/101")

        assert response.status_code == 200
        assert response.json() == [
            {"id": 200, "by": "bob", "time": 1700000300, "text": "comment 200"},
            {"id": 202, "by": "bob", "time": 1700000302, "text": None},
        ]

        client.get("/api/comments/101")
        assert len(upstream.calls_to("/item/101.json")) == 1
