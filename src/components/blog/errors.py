"""
Blog domain errors.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BlogValidationError:
    """Field-level validation error."""

    code: str
    message: str
    field: str | None = None


class BlogError(Exception):
    """Base class for blog errors."""


class UnknownCategoryError(BlogError):
    """Raised when a post references categories that are not registered."""

    def __init__(self, slugs: list[str]) -> None:
        self.slugs = list(dict.fromkeys(slugs))
        super().__init__(
            f"Invalid categories: {', '.join(self.slugs)}. "
            "Please create these categories first."
        )


class UnsupportedLocaleError(BlogError):
    """Raised when a translation uses a locale the site does not serve."""

    def __init__(self, locales: list[str], supported: list[str]) -> None:
        self.locales = list(dict.fromkeys(locales))
        self.supported = list(supported)
        super().__init__(
            f"Unsupported locales: {', '.join(self.locales)}. "
            f"Supported: {', '.join(self.supported)}."
        )


class PostNotFoundError(BlogError):
    """Raised when a post row or post id does not exist."""

    def __init__(self, post_id: str) -> None:
        self.post_id = post_id
        super().__init__(f"Post not found: {post_id}")


class CategoryNotFoundError(BlogError):
    """Raised when a category id does not exist."""

    def __init__(self, category_id: str) -> None:
        self.category_id = category_id
        super().__init__(f"Category not found: {category_id}")


class CategoryValidationError(BlogError):
    """Raised when category fields fail validation."""

    def __init__(self, errors: list[BlogValidationError]) -> None:
        self.errors = errors
        messages = [e.message for e in errors]
        super().__init__(f"Category validation failed: {'; '.join(messages)}")


class ImportFormatError(BlogError):
    """Raised when an import payload cannot be read."""
