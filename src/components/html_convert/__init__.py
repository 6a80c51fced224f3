"""
HTML convert component - WYSIWYG HTML <-> content blocks.
"""

from ._impl import (
    EDITOR_RENDERERS,
    PLACEHOLDER_TYPES,
    block_to_html,
    blocks_to_html,
    find_unsupported_blocks,
    html_to_blocks,
    placeholder_comment,
)
from .component import run, run_blocks_to_html, run_html_to_blocks
from .models import BlocksOutput, BlocksToHtmlInput, EditorHtmlOutput, HtmlToBlocksInput

__all__ = [
    # Entry points
    "run",
    "run_blocks_to_html",
    "run_html_to_blocks",
    # Models
    "BlocksOutput",
    "BlocksToHtmlInput",
    "EditorHtmlOutput",
    "HtmlToBlocksInput",
    # Functions
    "EDITOR_RENDERERS",
    "PLACEHOLDER_TYPES",
    "block_to_html",
    "blocks_to_html",
    "find_unsupported_blocks",
    "html_to_blocks",
    "placeholder_comment",
]
