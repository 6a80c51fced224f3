"""
Render blocks component - Render content block documents to HTML.

Handles conversion of stored documents to safe, semantic HTML for SSR.

Invariants:
- I1: Every block type has a renderer; an unknown type is an error
- I2: Blocks render in document order
- I3: Plain text is escaped, inline markup is sanitized
- I4: Headings get stable slug ids for anchors
"""

from __future__ import annotations

from src.components.richtext import RichTextConfig
from src.rules.models import RichTextRules

from ._impl import BlockRenderer, RenderConfig
from .models import (
    ExtractHeadingsInput,
    Heading,
    HeadingsOutput,
    RenderDocumentInput,
    RenderDocumentOutput,
)


def _build_config(
    rules: RichTextRules | None,
    wrap_in_article: bool = False,
    add_heading_ids: bool = True,
) -> RenderConfig:
    """Build render config from rich text rules."""
    if rules is None:
        return RenderConfig(
            wrap_in_article=wrap_in_article,
            add_heading_ids=add_heading_ids,
        )

    return RenderConfig(
        rich_text_config=RichTextConfig.from_rules(rules),
        wrap_in_article=wrap_in_article,
        add_heading_ids=add_heading_ids,
    )


# --- Component Entry Points ---


def run_render(
    inp: RenderDocumentInput,
    *,
    rules: RichTextRules | None = None,
) -> RenderDocumentOutput:
    """
    Render a document to HTML.

    Args:
        inp: Input containing the document and render options.
        rules: Optional rich text rules for inline sanitization.

    Returns:
        RenderDocumentOutput with rendered HTML and sanitizer warnings.
    """
    config = _build_config(
        rules,
        wrap_in_article=inp.wrap_in_article,
        add_heading_ids=inp.add_heading_ids,
    )
    html, warnings = BlockRenderer(config=config).render(inp.document)

    return RenderDocumentOutput(html=html, warnings=warnings, success=True)


def run_extract_headings(inp: ExtractHeadingsInput) -> HeadingsOutput:
    """Extract headings for table of contents."""
    raw = BlockRenderer().extract_headings(inp.document)
    headings = tuple(Heading(level=h["level"], text=h["text"], id=h["id"]) for h in raw)
    return HeadingsOutput(headings=headings, success=True)


def run(
    inp: RenderDocumentInput | ExtractHeadingsInput,
    *,
    rules: RichTextRules | None = None,
) -> RenderDocumentOutput | HeadingsOutput:
    """
    Main entry point for the render blocks component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, RenderDocumentInput):
        return run_render(inp, rules=rules)
    elif isinstance(inp, ExtractHeadingsInput):
        return run_extract_headings(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
