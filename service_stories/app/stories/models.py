"""
Record models for stories and comments, plus the raw upstream shapes.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


UNTITLED = "Untitled"


class Story(BaseModel):
    """One front-page or newest-list entry."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str = UNTITLED
    by: Optional[str] = None
    time: Optional[int] = None
    score: Optional[int] = None
    descendants: Optional[int] = None
    url: Optional[str] = None


class Comment(BaseModel):
    """One first-level reply to a story."""

    model_config = ConfigDict(frozen=True)

    id: int
    by: Optional[str] = None
    time: Optional[int] = None
    text: Optional[str] = None


class FrontPage(BaseModel):
    """Page data for the story index."""

    trending: List[Story]
    newest: List[Story]


class SearchHit(BaseModel):
    """A story record as returned by the search API."""

    model_config = ConfigDict(extra="ignore")

    objectID: int  # sent as a numeric string
    title: Optional[str] = None
    url: Optional[str] = None
    author: Optional[str] = None
    created_at_i: Optional[int] = None
    points: Optional[int] = None
    num_comments: Optional[int] = None


class SearchResponse(BaseModel):
    """Envelope returned by the search endpoints."""

    model_config = ConfigDict(extra="ignore")

    hits: List[SearchHit] = Field(default_factory=list)


class Item(BaseModel):
    """A story, comment or other node from the item API."""

    model_config = ConfigDict(extra="ignore")

    id: int
    by: Optional[str] = None
    time: Optional[int] = None
    text: Optional[str] = None
    kids: Optional[List[int]] = None
    type: Optional[str] = None
    deleted: Optional[bool] = None
    dead: Optional[bool] = None
    score: Optional[int] = None
    descendants: Optional[int] = None
    url: Optional[str] = None
    title: Optional[str] = None
