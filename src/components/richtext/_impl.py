"""
Inline rich text sanitization.

Block fields such as paragraph content, callout content and list items may
carry inline markup written in the visual editor. Before that markup reaches a
rendered page it is reduced to a whitelist of inline tags and attributes.

Key behaviors:
- Disallowed tags are unwrapped, keeping their text
- Executable containers (script, style, iframe...) are dropped with content
- Links with forbidden protocols lose the anchor but keep the text
- Links get rel attributes from configuration
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bs4 import BeautifulSoup
from bs4.element import Tag

from src.rules.models import RichTextRules

from .models import RichTextValidationError

DROPPED_WITH_CONTENT = frozenset(
    ["script", "style", "iframe", "object", "embed", "template", "noscript", "form"]
)


@dataclass(frozen=True)
class RichTextConfig:
    """Rich text configuration from rules."""

    allow_tags: frozenset[str] = field(
        default_factory=lambda: frozenset(
            [
                "a",
                "b",
                "br",
                "code",
                "del",
                "em",
                "i",
                "mark",
                "s",
                "small",
                "span",
                "strong",
                "sub",
                "sup",
                "u",
            ]
        )
    )

    allow_attrs: dict[str, frozenset[str]] = field(
        default_factory=lambda: {
            "a": frozenset(["href", "title", "target"]),
            "span": frozenset(["class"]),
        }
    )

    add_noopener: bool = True
    add_noreferrer: bool = True
    add_ugc: bool = False

    forbid_protocols: frozenset[str] = field(
        default_factory=lambda: frozenset(["javascript:", "data:", "vbscript:"])
    )

    @classmethod
    def from_rules(cls, rules: RichTextRules) -> RichTextConfig:
        return cls(
            allow_tags=frozenset(t.lower() for t in rules.allow_tags),
            allow_attrs={
                tag.lower(): frozenset(a.lower() for a in attrs)
                for tag, attrs in rules.allow_attrs.items()
            },
            add_noopener=rules.link_rel.noopener,
            add_noreferrer=rules.link_rel.noreferrer,
            add_ugc=rules.link_rel.ugc,
            forbid_protocols=frozenset(p.lower() for p in rules.forbid_protocols),
        )


DEFAULT_CONFIG = RichTextConfig()


def _normalize_url(url: str) -> str:
    """Reduce a URL to what a browser reads as its scheme prefix."""
    # Control characters and whitespace never count toward the scheme
    compact = "".join(ch for ch in url if ch > "\x20")
    return "".join(compact.split()).lower()


def is_safe_url(url: str, config: RichTextConfig = DEFAULT_CONFIG) -> bool:
    """
    Check if URL is safe (no forbidden protocols).

    Returns True if URL is safe, False if it uses a forbidden protocol.
    """
    if not url:
        return True

    compact = _normalize_url(url)
    return not any(compact.startswith(protocol) for protocol in config.forbid_protocols)


def build_link_rel(config: RichTextConfig = DEFAULT_CONFIG) -> str:
    """Build rel attribute value for links."""
    parts = []
    if config.add_noopener:
        parts.append("noopener")
    if config.add_noreferrer:
        parts.append("noreferrer")
    if config.add_ugc:
        parts.append("ugc")
    return " ".join(parts)


def sanitize_inline_html(
    html_content: str,
    config: RichTextConfig = DEFAULT_CONFIG,
) -> tuple[str, list[RichTextValidationError]]:
    """
    Reduce an inline HTML fragment to the configured whitelist.

    Returns:
        Tuple of (sanitized_html, list of warnings)
    """
    if not html_content:
        return "", []

    errors: list[RichTextValidationError] = []
    soup = BeautifulSoup(html_content, "html.parser")

    for tag in soup.find_all(list(DROPPED_WITH_CONTENT)):
        if tag.decomposed:
            continue
        errors.append(
            RichTextValidationError(
                code="dropped_tag",
                message=f"Tag '{tag.name}' was removed with its content",
            )
        )
        tag.decompose()

    for tag in soup.find_all(True):
        _sanitize_tag(tag, config, errors)

    return str(soup), errors


def _sanitize_tag(
    tag: Tag,
    config: RichTextConfig,
    errors: list[RichTextValidationError],
) -> None:
    tag_name = tag.name.lower()

    if tag_name not in config.allow_tags:
        errors.append(
            RichTextValidationError(
                code="stripped_tag",
                message=f"Tag '{tag_name}' was stripped",
            )
        )
        tag.unwrap()
        return

    allowed_attrs = config.allow_attrs.get(tag_name, frozenset())
    for name in list(tag.attrs):
        if name.lower() not in allowed_attrs:
            errors.append(
                RichTextValidationError(
                    code="stripped_attribute",
                    message=f"Attribute '{name}' stripped from '{tag_name}'",
                    path=tag_name,
                )
            )
            del tag[name]

    if tag_name != "a":
        return

    href = tag.get("href", "")
    if not isinstance(href, str) or not is_safe_url(href, config):
        errors.append(
            RichTextValidationError(
                code="unsafe_url",
                message=f"Unsafe URL protocol in href: {str(href)[:50]}",
                path=tag_name,
            )
        )
        tag.unwrap()
        return

    if href:
        tag["href"] = href.strip()
    rel = build_link_rel(config)
    if rel:
        tag["rel"] = rel


def extract_text(html_content: str) -> str:
    """Plain text of an HTML fragment, all markup removed."""
    if not html_content:
        return ""
    soup = BeautifulSoup(html_content, "html.parser")
    for tag in soup.find_all(list(DROPPED_WITH_CONTENT)):
        if not tag.decomposed:
            tag.decompose()
    return soup.get_text()
