"""
Tests for the story cache warm script.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..', 'scripts'))

from warm_story_cache import _parse_args, warm  # noqa: E402
from service_stories.app.stories.models import Comment, FrontPage, Story  # noqa: E402
from shared.errors import UpstreamFetchError  # noqa: E402


def _loader():
    loader = AsyncMock()
    loader.load_front_page.return_value = FrontPage(
        trending=[Story(id=1), Story(id=2)],
        newest=[Story(id=2), Story(id=3)],
    )
    loader.load_comments.return_value = [Comment(id=10)]
    return loader


@pytest.mark.asyncio
async def test_warm_front_page_only():
    loader = _loader()

    summary = await warm(loader, "https://news.example.com/", comments=False)

    loader.load_front_page.assert_awaited_once_with("https://news.example.com/api/stories")
    loader.load_comments.assert_not_awaited()
    assert summary == {"trending": 2, "newest": 2, "comment_threads": 0, "errors": []}


@pytest.mark.asyncio
async def test_warm_comments_once_per_story():
    loader = _loader()

    summary = await warm(loader, "https://news.example.com", comments=True)

    warmed = sorted(call.args[1] for call in loader.load_comments.await_args_list)
    assert warmed == [1, 2, 3]
    loader.load_comments.assert_any_await("https://news.example.com/api/comments/3", 3)
    assert summary["comment_threads"] == 3


@pytest.mark.asyncio
async def test_warm_reports_failed_threads():
    loader = _loader()
    loader.load_comments.side_effect = [
        [Comment(id=10)],
        UpstreamFetchError("https://items.test/item/2.json", 500),
        [],
    ]

    summary = await warm(loader, "https://news.example.com", comments=True)

    assert summary["comment_threads"] == 2
    assert summary["errors"][0]["story_id"] == 2


@pytest.mark.asyncio
async def test_warm_limits_threads_in_flight():
    loader = _loader()
    loader.load_front_page.return_value = FrontPage(
        trending=[Story(id=story_id) for story_id in range(1, 31)],
        newest=[Story(id=story_id) for story_id in range(31, 61)],
    )
    in_flight = []
    peak = []

    async def _load(identity, story_id):
        in_flight.append(story_id)
        peak.append(len(in_flight))
        await asyncio.sleep(0)
        in_flight.remove(story_id)
        return []

    loader.load_comments.side_effect = _load

    summary = await warm(loader, "https://news.example.com", comments=True, concurrency=4)

    assert summary["comment_threads"] == 60
    assert max(peak) == 4


def test_parse_args_defaults():
    args = _parse_args(["--base-url", "https://news.example.com"])

    assert args.base_url == "https://news.example.com"
    assert args.comments is False
    assert args.output is None
    assert args.concurrency == 10
