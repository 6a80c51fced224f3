"""
Richtext component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --- Validation Error ---


@dataclass(frozen=True)
class RichTextValidationError:
    """Rich text sanitization warning."""

    code: str
    message: str
    path: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class SanitizeRichTextInput:
    """Input for sanitizing an inline HTML fragment."""

    html: str


@dataclass(frozen=True)
class ExtractTextInput:
    """Input for extracting plain text from an inline HTML fragment."""

    html: str


# --- Output Models ---


@dataclass(frozen=True)
class SanitizeOutput:
    """Output for sanitized rich text."""

    html: str
    errors: list[RichTextValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class TextOutput:
    """Output containing extracted plain text."""

    text: str
    success: bool = True
