"""
HTML convert component - Visual editor bridge.

Invariants:
- I1: Forward conversion never raises on malformed HTML
- I2: Reverse conversion escapes code bodies and attribute values
- I3: Blocks the editor cannot show are reported, never silently hidden
"""

from __future__ import annotations

from ._impl import blocks_to_html, find_unsupported_blocks, html_to_blocks
from .models import BlocksOutput, BlocksToHtmlInput, EditorHtmlOutput, HtmlToBlocksInput


def run_html_to_blocks(inp: HtmlToBlocksInput) -> BlocksOutput:
    """Convert editor HTML into a document."""
    return BlocksOutput(document=html_to_blocks(inp.html))


def run_blocks_to_html(inp: BlocksToHtmlInput) -> EditorHtmlOutput:
    """Render a document for the visual editor and report what it cannot show."""
    unsupported = [
        (getattr(block, "type", "unknown"), block.id)
        for block in find_unsupported_blocks(inp.document)
    ]
    return EditorHtmlOutput(html=blocks_to_html(inp.document), unsupported=unsupported)


def run(inp: HtmlToBlocksInput | BlocksToHtmlInput) -> BlocksOutput | EditorHtmlOutput:
    """Dispatch on input type."""
    if isinstance(inp, HtmlToBlocksInput):
        return run_html_to_blocks(inp)
    elif isinstance(inp, BlocksToHtmlInput):
        return run_blocks_to_html(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
