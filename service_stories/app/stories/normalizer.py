"""
Maps raw upstream records onto the Story and Comment shapes.

Both upstream APIs describe the same story with different field names:

    search API      item API        Story
    ----------      --------        -----
    objectID        id              id
    title           title           title ("Untitled" when absent or empty)
    author          by              by
    created_at_i    time            time
    points          score           score
    num_comments    descendants     descendants
    url             url             url

Every function here is pure.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Union

from .models import UNTITLED, Comment, Item, SearchHit, Story


class SourceShape(str, Enum):
    """Which upstream API a raw record came from."""

    SEARCH = "search"
    ITEM = "item"


RawStory = Union[SearchHit, Item, Mapping[str, Any]]


def normalize_story(raw: RawStory, shape: SourceShape) -> Story:
    """Build a Story from a raw search hit or item."""
    if shape is SourceShape.SEARCH:
        hit = raw if isinstance(raw, SearchHit) else SearchHit.model_validate(raw)
        return Story(
            id=hit.objectID,
            title=_title(hit.title),
            by=hit.author,
            time=hit.created_at_i,
            score=hit.points,
            descendants=hit.num_comments,
            url=hit.url,
        )

    item = raw if isinstance(raw, Item) else Item.model_validate(raw)
    return Story(
        id=item.id,
        title=_title(item.title),
        by=item.by,
        time=item.time,
        score=item.score,
        descendants=item.descendants,
        url=item.url,
    )


def is_live_comment(item: Optional[Item]) -> bool:
    """True for comment items that are neither deleted nor dead."""
    if item is None:
        return False
    return item.type == "comment" and not item.deleted and not item.dead


def normalize_comment(item: Optional[Item]) -> Optional[Comment]:
    """Build a Comment, or None when the item is not a live comment."""
    if not is_live_comment(item):
        return None
    return Comment(id=item.id, by=item.by, time=item.time, text=item.text)


def _title(value: Optional[str]) -> str:
    return value if value else UNTITLED
