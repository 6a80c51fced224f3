"""
Render blocks component input/output models.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from src.components.richtext import RichTextValidationError
from src.domain.blocks import BaseBlock


@dataclass(frozen=True)
class Heading:
    """Extracted heading for TOC."""

    level: int
    text: str
    id: str


# --- Input Models ---


@dataclass(frozen=True)
class RenderDocumentInput:
    """Input for rendering a document to HTML."""

    document: Sequence[BaseBlock]
    wrap_in_article: bool = False
    add_heading_ids: bool = True


@dataclass(frozen=True)
class ExtractHeadingsInput:
    """Input for extracting headings for TOC."""

    document: Sequence[BaseBlock]


# --- Output Models ---


@dataclass(frozen=True)
class RenderDocumentOutput:
    """Output containing rendered HTML."""

    html: str
    warnings: list[RichTextValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class HeadingsOutput:
    """Output containing extracted headings."""

    headings: tuple[Heading, ...]
    success: bool = True
