"""
CategoryService - Registered categories and the localized category list.

Key behaviors:
- Slugs match the configured pattern and are unique
- Listing merges registered categories with slugs only seen on published
  posts; the latter get a humanized name and a rotating palette color
"""

from __future__ import annotations

import logging
import re
from uuid import uuid4

from src.components.blog import (
    BlogPostRepoPort,
    BlogValidationError,
    CategoryNotFoundError,
    CategoryRepoPort,
    CategoryValidationError,
    TimePort,
)
from src.components.documents import parse_categories
from src.domain.entities import DEFAULT_CATEGORY_COLOR, BlogCategory, LocalizedCategory
from src.rules.models import CategoryRules, Rules, SlugRules

logger = logging.getLogger(__name__)

COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{3,8}$")
DEFAULT_DERIVED_COLORS = [
    "#6366f1",
    "#ec4899",
    "#f59e0b",
    "#10b981",
    "#3b82f6",
    "#8b5cf6",
    "#ef4444",
    "#14b8a6",
]


def humanize_slug(slug: str) -> str:
    """``web-dev`` -> ``Web dev``."""
    return (slug[:1].upper() + slug[1:]).replace("-", " ")


def localized_name(category: BlogCategory, locale: str) -> str:
    return category.name_pl if locale == "pl" else category.name_en


def validate_category_fields(
    slug: str,
    name_en: str,
    name_pl: str,
    color: str | None,
    slug_rules: SlugRules | None = None,
) -> list[BlogValidationError]:
    """Field checks shared by create and update."""
    slug_rules = slug_rules or SlugRules()
    errors: list[BlogValidationError] = []

    if not slug:
        errors.append(BlogValidationError("slug_required", "Slug is required", "slug"))
    elif len(slug) > slug_rules.max:
        errors.append(
            BlogValidationError(
                "slug_too_long", f"Slug exceeds {slug_rules.max} characters", "slug"
            )
        )
    elif not re.match(slug_rules.pattern, slug):
        errors.append(
            BlogValidationError(
                "slug_invalid",
                "Slug may only contain lowercase letters, digits and hyphens",
                "slug",
            )
        )

    if not name_en.strip():
        errors.append(BlogValidationError("name_required", "English name is required", "name_en"))
    if not name_pl.strip():
        errors.append(BlogValidationError("name_required", "Polish name is required", "name_pl"))

    if color is not None and not COLOR_PATTERN.match(color):
        errors.append(BlogValidationError("color_invalid", f"Invalid color '{color}'", "color"))

    return errors


class CategoryService:
    """Category CRUD and localized listing."""

    def __init__(
        self,
        categories: CategoryRepoPort,
        posts: BlogPostRepoPort,
        time: TimePort,
        rules: Rules | None = None,
    ) -> None:
        self._categories = categories
        self._posts = posts
        self._time = time
        self._slug_rules = rules.slugs if rules else SlugRules()
        self._category_rules = (
            rules.categories if rules else CategoryRules(derived_colors=DEFAULT_DERIVED_COLORS)
        )

    def list_registered(self) -> list[BlogCategory]:
        return self._categories.list_all()

    def create_category(
        self,
        slug: str,
        name_en: str,
        name_pl: str,
        color: str | None = None,
    ) -> BlogCategory:
        """
        Register a category.

        Raises:
            CategoryValidationError: On invalid fields or a taken slug.
        """
        slug = slug.strip()
        errors = validate_category_fields(slug, name_en, name_pl, color, self._slug_rules)
        if not errors and self._categories.get_by_slug(slug):
            errors.append(
                BlogValidationError("slug_exists", f"Category '{slug}' already exists", "slug")
            )
        if errors:
            raise CategoryValidationError(errors)

        category = BlogCategory(
            id=str(uuid4()),
            slug=slug,
            name_en=name_en.strip(),
            name_pl=name_pl.strip(),
            color=color or self._category_rules.default_color,
            created_at=self._time.now_utc(),
        )
        saved = self._categories.save(category)
        logger.info("Created category %s", slug)
        return saved

    def update_category(
        self,
        category_id: str,
        *,
        slug: str | None = None,
        name_en: str | None = None,
        name_pl: str | None = None,
        color: str | None = None,
    ) -> BlogCategory:
        """
        Change category fields. None leaves a field unchanged.

        Raises:
            CategoryNotFoundError: If the id is unknown.
            CategoryValidationError: On invalid fields or a taken slug.
        """
        current = self._categories.get_by_id(category_id)
        if current is None:
            raise CategoryNotFoundError(category_id)

        updated = current.model_copy(
            update={
                "slug": slug.strip() if slug is not None else current.slug,
                "name_en": name_en.strip() if name_en is not None else current.name_en,
                "name_pl": name_pl.strip() if name_pl is not None else current.name_pl,
                "color": color if color is not None else current.color,
            }
        )
        errors = validate_category_fields(
            updated.slug, updated.name_en, updated.name_pl, updated.color, self._slug_rules
        )
        if not errors and updated.slug != current.slug:
            taken = self._categories.get_by_slug(updated.slug)
            if taken and taken.id != category_id:
                errors.append(
                    BlogValidationError(
                        "slug_exists", f"Category '{updated.slug}' already exists", "slug"
                    )
                )
        if errors:
            raise CategoryValidationError(errors)

        return self._categories.save(updated)

    def delete_category(self, category_id: str) -> None:
        """
        Remove a category. Posts keep the slug in their category list.

        Raises:
            CategoryNotFoundError: If the id is unknown.
        """
        current = self._categories.get_by_id(category_id)
        if current is None:
            raise CategoryNotFoundError(category_id)
        self._categories.delete(category_id)
        logger.info("Deleted category %s", current.slug)

    def list_categories(self, locale: str) -> list[LocalizedCategory]:
        """Registered categories, then slugs only found on published posts."""
        registered = self._categories.list_all()
        result = [
            LocalizedCategory(**cat.model_dump(), name=localized_name(cat, locale))
            for cat in registered
        ]

        known = {cat.slug for cat in registered}
        derived: list[str] = []
        for raw in self._posts.list_published_categories(locale):
            for slug in parse_categories(raw):
                if slug not in known and slug not in derived:
                    derived.append(slug)

        palette = self._category_rules.derived_colors or [DEFAULT_CATEGORY_COLOR]
        now = self._time.now_utc()
        for index, slug in enumerate(derived):
            name = humanize_slug(slug)
            result.append(
                LocalizedCategory(
                    id=slug,
                    slug=slug,
                    name_en=name,
                    name_pl=name,
                    name=name,
                    color=palette[index % len(palette)],
                    created_at=now,
                )
            )
        return result
