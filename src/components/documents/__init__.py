"""
Documents component - Stored text codec for content block documents.
"""

from ._impl import (
    deserialize_document,
    join_categories,
    parse_blog_post,
    parse_categories,
    serialize_document,
)

__all__ = [
    "deserialize_document",
    "join_categories",
    "parse_blog_post",
    "parse_categories",
    "serialize_document",
]
