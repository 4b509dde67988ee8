"""
Concurrent per-item fetches that assemble an ordered collection.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from shared.logging import get_logger

from ..adapters.item_client import ItemApiClient
from .models import Comment
from .normalizer import normalize_comment


T = TypeVar("T")

DEFAULT_CONCURRENCY = 10
MAX_COMMENTS = 40

logger = get_logger("stories.fanout")


async def gather_ordered(
    ids: Sequence[int],
    fetch_one: Callable[[int], Awaitable[T]],
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    partial: bool = False,
) -> List[T]:
    """
    Fetch every id concurrently and return the results in ``ids`` order.

    With ``partial=False`` the first failing fetch fails the whole call and no
    results are returned. With ``partial=True`` failed ids are logged and
    left out of the result.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _bounded(item_id: int) -> T:
        async with semaphore:
            return await fetch_one(item_id)

    tasks = [_bounded(item_id) for item_id in ids]
    if not partial:
        return list(await asyncio.gather(*tasks))

    outcomes = await asyncio.gather(*tasks, return_exceptions=True)
    results: List[T] = []
    for item_id, outcome in zip(ids, outcomes):
        if isinstance(outcome, Exception):
            logger.warning("Dropping item after failed fetch", item_id=item_id, error=str(outcome))
            continue
        results.append(outcome)
    return results


async def fetch_comments(
    client: ItemApiClient,
    story_id: int,
    *,
    limit: int = MAX_COMMENTS,
    concurrency: int = DEFAULT_CONCURRENCY,
    partial: bool = False,
) -> List[Comment]:
    """First-level live comments of ``story_id``, in the story's kid order."""
    story = await client.item(story_id)
    kids = (story.kids or []) if story else []
    ids = kids[:limit]

    async def _fetch_comment(item_id: int) -> Optional[Comment]:
        return normalize_comment(await client.item(item_id))

    comments = await gather_ordered(ids, _fetch_comment, concurrency=concurrency, partial=partial)
    result = [comment for comment in comments if comment is not None]

    logger.debug(
        "Comment fan-out complete",
        story_id=story_id,
        requested=len(ids),
        kept=len(result),
    )
    return result
