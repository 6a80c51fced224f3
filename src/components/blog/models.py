"""
Blog component input/output models.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.domain.entities import ParsedBlogPost, SortOrder


@dataclass(frozen=True)
class UpsertResult:
    """Outcome of a multi-locale upsert."""

    post_id: str
    ids: list[str]
    success: bool = True


@dataclass(frozen=True)
class ListPostsQuery:
    """Public listing filters."""

    locale: str
    page: int = 1
    limit: int | None = None  # None -> settings posts_per_page
    category: str | None = None
    search: str | None = None
    sort: SortOrder = "newest"
    exclude_featured: bool = False


@dataclass(frozen=True)
class PostPage:
    """One page of parsed posts."""

    posts: list[ParsedBlogPost]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit > 0 else 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


@dataclass(frozen=True)
class Translation:
    """A published locale version of a post."""

    locale: str
    slug: str


@dataclass(frozen=True)
class ToggleResult:
    """New value of a toggled flag."""

    id: str
    value: bool
    success: bool = True


@dataclass(frozen=True)
class SettingsUpdate:
    """Partial settings update; None leaves a field unchanged."""

    enabled: bool | None = None
    posts_per_page: int | None = None
    show_featured: bool | None = None

