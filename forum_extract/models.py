from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

UNKNOWN_AUTHOR = "Unknown"


@dataclass(frozen=True)
class Article:
    """One listing row. `url` is relative to the forum base url."""

    title: str
    author: str
    date: str
    url: str
    view_count: int = 0
    reply_count: int = 0
    origin: Optional[str] = None


@dataclass(frozen=True)
class ForumThread:
    """A thread-type filter link from the listing navigation (not a discussion)."""

    name: str
    url: str


@dataclass(frozen=True)
class ForumPage:
    articles: list[Article] = field(default_factory=list)
    threads: list[ForumThread] = field(default_factory=list)


@dataclass(frozen=True)
class Post:
    author: str
    avatar_url: Optional[str]
    date: str
    content: str
    reply_url: str
    recommend_add_url: Optional[str] = None


@dataclass(frozen=True)
class ArticleDetail:
    """
    Thread page parsed from a thread-view document.

    `skipped` maps post positions that could not be assembled to the reason.
    """

    title: str
    posts: list[Post]
    next_page_url: Optional[str] = None
    form_hash: Optional[str] = None
    abstract: Optional[Mapping[str, Any]] = None
    skipped: Mapping[int, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PreviewPost:
    date: str
    content: str
    avatar: str = ""
    author: str = UNKNOWN_AUTHOR
