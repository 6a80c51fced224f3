"""
Blog component - Post administration, listings, settings and views.
"""

from ._impl import BlogService, rows_to_document
from .errors import (
    BlogError,
    BlogValidationError,
    CategoryNotFoundError,
    CategoryValidationError,
    ImportFormatError,
    PostNotFoundError,
    UnknownCategoryError,
    UnsupportedLocaleError,
)
from .example import EXAMPLE_CATEGORIES, generate_example_post
from .models import (
    ListPostsQuery,
    PostPage,
    SettingsUpdate,
    ToggleResult,
    Translation,
    UpsertResult,
)
from .ports import BlogPostRepoPort, CategoryRepoPort, SettingsRepoPort, TimePort

__all__ = [
    # Service
    "BlogService",
    "rows_to_document",
    # Errors
    "BlogError",
    "BlogValidationError",
    "CategoryNotFoundError",
    "CategoryValidationError",
    "ImportFormatError",
    "PostNotFoundError",
    "UnknownCategoryError",
    "UnsupportedLocaleError",
    # Example
    "EXAMPLE_CATEGORIES",
    "generate_example_post",
    # Models
    "ListPostsQuery",
    "PostPage",
    "SettingsUpdate",
    "ToggleResult",
    "Translation",
    "UpsertResult",
    # Ports
    "BlogPostRepoPort",
    "CategoryRepoPort",
    "SettingsRepoPort",
    "TimePort",
]
