#!/usr/bin/env python3
"""
Warm the story cache for the front page and, optionally, its comment threads.

Cache keys are derived from the public request URL, so the warmer needs the
base URL the service is reached at. Only a shared backend (Redis) is worth
warming from outside the service process.
"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.config import get_config  # noqa: E402
from shared.logging import configure_logging  # noqa: E402
from service_stories.app.adapters.upstream_client import UpstreamClient  # noqa: E402
from service_stories.app.caching.store import RedisCacheStore  # noqa: E402
from service_stories.app.loader import StoryLoader  # noqa: E402
from service_stories.app.stories.fanout import DEFAULT_CONCURRENCY  # noqa: E402


async def warm(
    loader: StoryLoader,
    base_url: str,
    *,
    comments: bool,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> Dict[str, Any]:
    """
    Load the front page (and comments for every listed story) through the cache.

    At most ``concurrency`` comment threads are loaded at a time.
    """
    base = base_url.rstrip("/")
    page = await loader.load_front_page(f"{base}/api/stories")
    summary: Dict[str, Any] = {
        "trending": len(page.trending),
        "newest": len(page.newest),
        "comment_threads": 0,
        "errors": [],
    }
    if not comments:
        return summary

    semaphore = asyncio.Semaphore(concurrency)

    async def _warm_thread(story_id: int):
        async with semaphore:
            return await loader.load_comments(f"{base}/api/comments/{story_id}", story_id)

    story_ids = list(dict.fromkeys(story.id for story in page.trending + page.newest))
    results = await asyncio.gather(
        *(_warm_thread(story_id) for story_id in story_ids),
        return_exceptions=True,
    )
    for story_id, outcome in zip(story_ids, results):
        if isinstance(outcome, Exception):
            summary["errors"].append({"story_id": story_id, "error": str(outcome)})
        else:
            summary["comment_threads"] += 1
    return summary


async def _run(base_url: str, redis_url: str, comments: bool, concurrency: int) -> Dict[str, Any]:
    config = get_config("stories", 8000, cache_backend="redis", redis_url=redis_url)
    configure_logging("stories", config.log_level)
    upstream = UpstreamClient(timeout=config.upstream_timeout_seconds)
    store = RedisCacheStore(redis_url)
    try:
        loader = StoryLoader.from_config(config, upstream, store)
        return await warm(loader, base_url, comments=comments, concurrency=concurrency)
    finally:
        await upstream.close()
        await store.close()


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Warm the story cache for the front page.")
    parser.add_argument("--base-url", required=True, help="Public base URL of the story service, e.g. https://news.example.com")
    parser.add_argument("--redis-url", default=os.getenv("STORIES_REDIS_URL", "redis://localhost:6379/0"), help="Redis connection URL")
    parser.add_argument("--comments", action="store_true", help="Also warm comment threads for every listed story")
    parser.add_argument("--concurrency", type=int, default=DEFAULT_CONCURRENCY, help="Maximum comment threads warmed at once")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write JSON summary")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    args = _parse_args(argv)
    try:
        summary = asyncio.run(_run(args.base_url, args.redis_url, args.comments, args.concurrency))
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"[story-cache-warm] failed: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(summary, indent=2))

    if args.output:
        args.output.write_text(json.dumps(summary, indent=2))

    return 0 if not summary["errors"] else 2


if __name__ == "__main__":
    raise SystemExit(main())
