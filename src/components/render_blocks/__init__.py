"""
Render blocks component - Render content block documents to HTML.
"""

from ._impl import (
    DEFAULT_RENDER_CONFIG,
    RENDERERS,
    BlockRenderer,
    RenderConfig,
    diff_lines,
    flowchart_source,
    render_document,
)
from .component import run, run_extract_headings, run_render
from .models import (
    ExtractHeadingsInput,
    Heading,
    HeadingsOutput,
    RenderDocumentInput,
    RenderDocumentOutput,
)

__all__ = [
    # Entry points
    "run",
    "run_extract_headings",
    "run_render",
    # Models
    "ExtractHeadingsInput",
    "Heading",
    "HeadingsOutput",
    "RenderDocumentInput",
    "RenderDocumentOutput",
    # Renderer
    "DEFAULT_RENDER_CONFIG",
    "RENDERERS",
    "BlockRenderer",
    "RenderConfig",
    "diff_lines",
    "flowchart_source",
    "render_document",
]
