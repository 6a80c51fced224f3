"""
Transfer component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from src.domain.entities import BlogCategory, BlogPost, BlogSettings

from .models import LoadCounts


class BlogDataStorePort(Protocol):
    """Whole-table access to the blog tables."""

    def dump(self) -> tuple[list[BlogPost], list[BlogCategory], list[BlogSettings]]:
        """Every row of the post, category and settings tables."""
        ...

    def load(
        self,
        posts: list[BlogPost],
        categories: list[BlogCategory],
        settings: list[BlogSettings],
        *,
        clear: bool = False,
    ) -> LoadCounts:
        """
        Insert rows in one transaction, skipping ids that already exist.
        With ``clear`` the tables are emptied first in the same transaction.
        """
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
