"""
Blog component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol

from src.domain.entities import BlogCategory, BlogPost, BlogSettings, SortOrder


class BlogPostRepoPort(Protocol):
    """Blog post row storage. One row per (post_id, locale)."""

    def get_by_id(self, row_id: str) -> BlogPost | None:
        """Get a row by ``{post_id}_{locale}`` id."""
        ...

    def list_by_post_id(self, post_id: str) -> list[BlogPost]:
        """All locale rows of one post."""
        ...

    def get_published_by_slug(self, slug: str, locale: str | None = None) -> BlogPost | None:
        """Published row with this slug, in ``locale`` when given."""
        ...

    def upsert_many(self, rows: Sequence[BlogPost]) -> None:
        """Insert or replace rows in a single transaction."""
        ...

    def save(self, row: BlogPost) -> BlogPost:
        """Insert or replace one row."""
        ...

    def delete_by_post_id(self, post_id: str) -> int:
        """Delete every locale row of a post. Returns rows deleted."""
        ...

    def list_published(
        self,
        *,
        locale: str,
        offset: int,
        limit: int,
        category: str | None = None,
        search: str | None = None,
        sort: SortOrder = "newest",
        exclude_featured: bool = False,
    ) -> tuple[list[BlogPost], int]:
        """Page of published rows and the total matching count."""
        ...

    def list_all(
        self,
        *,
        offset: int = 0,
        limit: int | None = None,
        search: str | None = None,
    ) -> tuple[list[BlogPost], int]:
        """Page of all rows (any locale, any state), newest created first."""
        ...

    def get_featured(self, locale: str) -> BlogPost | None:
        """Most recently published featured row in ``locale``."""
        ...

    def list_published_slugs(self) -> list[tuple[str, str]]:
        """(slug, locale) of every published row."""
        ...

    def list_published_categories(self, locale: str) -> list[str | None]:
        """Raw category strings of published rows in ``locale``."""
        ...

    def increment_views(self, row_id: str) -> bool:
        """Add one view. Returns False when the row does not exist."""
        ...

    def list_most_viewed(self, locale: str, limit: int) -> list[BlogPost]:
        """Published rows in ``locale`` by views, highest first."""
        ...

    def list_related_candidates(
        self,
        *,
        exclude_post_id: str,
        locale: str,
        limit: int,
    ) -> list[BlogPost]:
        """Published rows in ``locale`` of other posts, most recent first."""
        ...

    def delete_all(self) -> None:
        """Remove every row."""
        ...


class CategoryRepoPort(Protocol):
    """Registered category storage."""

    def list_all(self) -> list[BlogCategory]:
        ...

    def get_by_id(self, category_id: str) -> BlogCategory | None:
        ...

    def get_by_slug(self, slug: str) -> BlogCategory | None:
        ...

    def existing_slugs(self, slugs: Iterable[str]) -> set[str]:
        """The subset of ``slugs`` that are registered."""
        ...

    def save(self, category: BlogCategory) -> BlogCategory:
        ...

    def delete(self, category_id: str) -> None:
        ...

    def delete_all(self) -> None:
        ...


class SettingsRepoPort(Protocol):
    """Singleton blog settings storage."""

    def get(self) -> BlogSettings | None:
        ...

    def save(self, settings: BlogSettings) -> BlogSettings:
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
