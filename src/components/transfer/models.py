"""
Transfer component models.

The export document keeps the stored row shape of each table; only the
envelope uses camelCase keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import BlogCategory, BlogPost, BlogSettings


class ExportTables(BaseModel):
    blog_posts: list[BlogPost] = Field(alias="blogPosts")
    blog_categories: list[BlogCategory] = Field(alias="blogCategories")
    blog_settings: list[BlogSettings] = Field(alias="blogSettings")

    model_config = ConfigDict(populate_by_name=True)


class BlogExport(BaseModel):
    version: str = Field(min_length=1)
    exported_at: datetime = Field(alias="exportedAt")
    tables: ExportTables

    model_config = ConfigDict(populate_by_name=True)


@dataclass(frozen=True)
class LoadCounts:
    """Rows written and rows skipped because the id already existed."""

    imported: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ImportValidation:
    """Result of checking an import payload without writing."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of an import."""

    message: str
    imported: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)
    success: bool = True


@dataclass(frozen=True)
class BlogStats:
    """Row counts for the admin dashboard."""

    blog_posts: int
    published_posts: int
    blog_categories: int
    locales: dict[str, int] = field(default_factory=dict)
    total_views: int = 0
