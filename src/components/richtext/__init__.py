"""
Richtext component - Inline HTML sanitization for block text fields.
"""

from ._impl import (
    DEFAULT_CONFIG,
    RichTextConfig,
    build_link_rel,
    extract_text,
    is_safe_url,
    sanitize_inline_html,
)
from .component import run, run_extract_text, run_sanitize
from .models import (
    ExtractTextInput,
    RichTextValidationError,
    SanitizeOutput,
    SanitizeRichTextInput,
    TextOutput,
)

__all__ = [
    # Entry points
    "run",
    "run_extract_text",
    "run_sanitize",
    # Models
    "ExtractTextInput",
    "RichTextValidationError",
    "SanitizeOutput",
    "SanitizeRichTextInput",
    "TextOutput",
    # Functions
    "DEFAULT_CONFIG",
    "RichTextConfig",
    "build_link_rel",
    "extract_text",
    "is_safe_url",
    "sanitize_inline_html",
]
