"""
Richtext component - Inline HTML sanitization for block text fields.

Invariants:
- I1: Only whitelisted tags survive; others are unwrapped
- I2: Only whitelisted attributes survive
- I3: Link URLs never carry a forbidden protocol
- I4: No script content in output
"""

from __future__ import annotations

from src.rules.models import RichTextRules

from ._impl import DEFAULT_CONFIG, RichTextConfig, extract_text, sanitize_inline_html
from .models import (
    ExtractTextInput,
    SanitizeOutput,
    SanitizeRichTextInput,
    TextOutput,
)


def _build_config(rules: RichTextRules | None) -> RichTextConfig:
    if rules is None:
        return DEFAULT_CONFIG
    return RichTextConfig.from_rules(rules)


# --- Component Entry Points ---


def run_sanitize(
    inp: SanitizeRichTextInput,
    *,
    rules: RichTextRules | None = None,
) -> SanitizeOutput:
    """
    Sanitize an inline HTML fragment.

    Args:
        inp: Input containing the fragment.
        rules: Optional rich text rules.

    Returns:
        SanitizeOutput with the cleaned fragment and warnings.
    """
    html, errors = sanitize_inline_html(inp.html, _build_config(rules))
    return SanitizeOutput(html=html, errors=errors, success=True)


def run_extract_text(inp: ExtractTextInput) -> TextOutput:
    """Extract plain text from an inline HTML fragment."""
    return TextOutput(text=extract_text(inp.html))


def run(
    inp: SanitizeRichTextInput | ExtractTextInput,
    *,
    rules: RichTextRules | None = None,
) -> SanitizeOutput | TextOutput:
    """
    Main entry point for the richtext component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, SanitizeRichTextInput):
        return run_sanitize(inp, rules=rules)
    elif isinstance(inp, ExtractTextInput):
        return run_extract_text(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
