"""
HTML convert component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.blocks import BaseBlock


@dataclass(frozen=True)
class HtmlToBlocksInput:
    """Input for converting editor HTML to a document."""

    html: str


@dataclass(frozen=True)
class BlocksToHtmlInput:
    """Input for rendering a document as editor HTML."""

    document: list[BaseBlock]


@dataclass(frozen=True)
class BlocksOutput:
    """Output containing a converted document."""

    document: list[BaseBlock]
    success: bool = True


@dataclass(frozen=True)
class EditorHtmlOutput:
    """
    Output containing editor HTML.

    ``unsupported`` lists (type, id) of blocks shown only as placeholders;
    saving from the visual editor will lose them.
    """

    html: str
    unsupported: list[tuple[str, str]] = field(default_factory=list)
    success: bool = True

    @property
    def lossy(self) -> bool:
        return bool(self.unsupported)
