"""
Document codec - stored text <-> ordered list of content blocks.

Key behaviors:
- serialize writes the camelCase wire form as JSON text
- deserialize never raises: unreadable text becomes an empty document,
  unreadable entries are dropped one by one
- categories are stored comma-joined; parsing drops empty segments
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence

from src.domain.blocks import BaseBlock, block_to_dict, parse_block
from src.domain.entities import BlogPost, ParsedBlogPost

logger = logging.getLogger(__name__)


def serialize_document(document: Sequence[BaseBlock]) -> str:
    """Encode a document as JSON text."""
    return json.dumps([block_to_dict(block) for block in document], ensure_ascii=False)


def deserialize_document(text: str | None, *, source: str | None = None) -> list[BaseBlock]:
    """
    Decode a stored document.

    Malformed text yields ``[]``. Entries that fail validation are skipped,
    the rest keep their order. ``source`` only labels log lines.
    """
    if not text:
        return []

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError, RecursionError) as e:
        logger.warning("Unreadable document%s: %s", _label(source), e)
        return []

    if not isinstance(data, list):
        logger.warning("Document%s is not a list (got %s)", _label(source), type(data).__name__)
        return []

    blocks: list[BaseBlock] = []
    for index, item in enumerate(data):
        try:
            blocks.append(parse_block(item))
        except (ValueError, RecursionError) as e:
            logger.warning("Dropping block %d%s: %s", index, _label(source), e)
    return blocks


def parse_categories(text: str | None) -> list[str]:
    """Split a comma-joined category string. Order kept, duplicates and blanks dropped."""
    if not text:
        return []
    slugs: list[str] = []
    for segment in text.split(","):
        slug = segment.strip()
        if slug and slug not in slugs:
            slugs.append(slug)
    return slugs


def join_categories(slugs: Iterable[str] | None) -> str:
    """Inverse of parse_categories."""
    return ",".join(parse_categories(",".join(slugs or [])))


def parse_blog_post(row: BlogPost) -> ParsedBlogPost:
    """Decode a stored row into its parsed form."""
    data = row.model_dump(exclude={"content", "categories"})
    return ParsedBlogPost(
        **data,
        content=deserialize_document(row.content, source=row.id),
        categories=parse_categories(row.categories),
    )


def _label(source: str | None) -> str:
    return f" in {source}" if source else ""
