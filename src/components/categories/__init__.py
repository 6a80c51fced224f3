"""
Categories component - Category registry and localized listing.
"""

from ._impl import (
    CategoryService,
    humanize_slug,
    localized_name,
    validate_category_fields,
)

__all__ = [
    "CategoryService",
    "humanize_slug",
    "localized_name",
    "validate_category_fields",
]
