"""
Visual editor bridge - HTML fragments <-> content block documents.

Key behaviors:
- Forward pass walks top-level nodes; unknown wrappers are recursed into
- Paragraphs keep inline markup, quotes and list items keep plain text only
- Reverse pass renders the editor block types directly; every other type
  becomes an HTML comment placeholder that the forward pass ignores, so a
  visual-editor round trip drops those blocks
"""

from __future__ import annotations

import html
import re
import secrets
from collections.abc import Callable, Sequence

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from src.domain.blocks import (
    BLOCK_TYPES,
    EDITOR_BLOCK_TYPES,
    BaseBlock,
    CalloutBlock,
    CodeBlock,
    DividerBlock,
    HeadingBlock,
    ImageBlock,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
)

DEFAULT_CODE_LANGUAGE = "plaintext"
ID_BYTES = 6  # 8 url-safe characters

HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4}
SKIPPED_TAGS = frozenset(["script", "style", "template"])
LANGUAGE_CLASS = re.compile(r"^language-(\S+)$")


class _IdFactory:
    """Short opaque ids, unique within one conversion."""

    def __init__(self) -> None:
        self._issued: set[str] = set()

    def __call__(self) -> str:
        while True:
            candidate = secrets.token_urlsafe(ID_BYTES)
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate


# --- HTML -> blocks ---


def html_to_blocks(html_content: str) -> list[BaseBlock]:
    """Convert a WYSIWYG HTML fragment into a document."""
    if not html_content or not html_content.strip():
        return []

    soup = BeautifulSoup(html_content, "html.parser")
    new_id = _IdFactory()
    blocks: list[BaseBlock] = []

    for node in list(soup.contents):
        _process_node(node, blocks, new_id)

    return blocks


def _process_node(
    node: PageElement,
    blocks: list[BaseBlock],
    new_id: Callable[[], str],
) -> None:
    # Comments, doctypes, CDATA: never content
    if isinstance(node, PreformattedString):
        return

    if isinstance(node, NavigableString):
        text = str(node).strip()
        if text:
            blocks.append(ParagraphBlock(id=new_id(), content=html.escape(text, quote=False)))
        return

    if not isinstance(node, Tag):
        return

    tag = node.name.lower()

    if tag in SKIPPED_TAGS:
        return

    if tag in HEADING_TAGS:
        blocks.append(
            HeadingBlock(
                id=new_id(),
                level=HEADING_TAGS[tag],  # type: ignore[arg-type]
                content=node.get_text().strip(),
            )
        )

    elif tag == "p":
        content = node.decode_contents().strip()
        if content:
            blocks.append(ParagraphBlock(id=new_id(), content=content))

    elif tag == "blockquote":
        blocks.append(
            QuoteBlock(
                id=new_id(),
                content=node.get_text().strip(),
                author=_attr(node, "data-author"),
            )
        )

    elif tag in ("ul", "ol"):
        items = [li.get_text().strip() for li in node.find_all("li")]
        if items:
            blocks.append(
                ListBlock(
                    id=new_id(),
                    style="ordered" if tag == "ol" else "unordered",
                    items=items,
                )
            )

    elif tag == "pre":
        blocks.append(_code_block(node, new_id()))

    elif tag == "img":
        blocks.append(
            ImageBlock(
                id=new_id(),
                src=_attr(node, "src") or "",
                alt=_attr(node, "alt") or "",
                caption=_attr(node, "data-caption"),
            )
        )

    elif tag == "hr":
        blocks.append(DividerBlock(id=new_id()))

    else:
        for child in list(node.children):
            _process_node(child, blocks, new_id)


def _code_block(pre: Tag, block_id: str) -> CodeBlock:
    code_el = pre.find("code")
    code_text = code_el.get_text() if isinstance(code_el, Tag) else ""
    if not code_text:
        code_text = pre.get_text()

    language = DEFAULT_CODE_LANGUAGE
    if isinstance(code_el, Tag):
        for css_class in code_el.get_attribute_list("class"):
            match = LANGUAGE_CLASS.match(css_class or "")
            if match:
                language = match.group(1)
                break

    return CodeBlock(
        id=block_id,
        language=language,
        code=code_text,
        filename=_attr(pre, "data-filename"),
    )


def _attr(node: Tag, name: str) -> str | None:
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


# --- blocks -> HTML ---


def _escape(text: str) -> str:
    return html.escape(text, quote=True)


def _data_attr(name: str, value: str | None) -> str:
    return f' data-{name}="{_escape(value)}"' if value else ""


def _paragraph_html(block: ParagraphBlock) -> str:
    return f"<p>{block.content}</p>"


def _heading_html(block: HeadingBlock) -> str:
    return f"<h{block.level}>{block.content}</h{block.level}>"


def _code_html(block: CodeBlock) -> str:
    return (
        f"<pre{_data_attr('filename', block.filename)}>"
        f'<code class="language-{_escape(block.language)}">{_escape(block.code)}</code>'
        f"</pre>"
    )


def _image_html(block: ImageBlock) -> str:
    return (
        f'<img src="{_escape(block.src)}" alt="{_escape(block.alt)}"'
        f"{_data_attr('caption', block.caption)} />"
    )


def _quote_html(block: QuoteBlock) -> str:
    return f"<blockquote{_data_attr('author', block.author)}>{block.content}</blockquote>"


def _list_html(block: ListBlock) -> str:
    tag = "ol" if block.style == "ordered" else "ul"
    items = "".join(f"<li>{item}</li>" for item in block.items)
    return f"<{tag}>{items}</{tag}>"


def _divider_html(block: DividerBlock) -> str:
    return "<hr />"


def _callout_html(block: CalloutBlock) -> str:
    title = f"<strong>{block.title}</strong>: " if block.title else ""
    return f'<div class="callout callout-{block.variant}">{title}{block.content}</div>'


EDITOR_RENDERERS: dict[str, Callable[..., str]] = {
    "paragraph": _paragraph_html,
    "heading": _heading_html,
    "code": _code_html,
    "image": _image_html,
    "quote": _quote_html,
    "list": _list_html,
    "divider": _divider_html,
    "callout": _callout_html,
}

PLACEHOLDER_TYPES: frozenset[str] = frozenset(BLOCK_TYPES) - EDITOR_BLOCK_TYPES


def placeholder_comment(block: BaseBlock) -> str:
    """Marker left in editor HTML for a block the editor cannot show."""
    block_type = getattr(block, "type", "unknown")
    block_id = block.id.replace("--", "-")
    return f"<!-- {block_type} block (ID: {block_id}) - edit in JSON mode for full control -->"


def block_to_html(block: BaseBlock) -> str:
    block_type = getattr(block, "type", None)
    renderer = EDITOR_RENDERERS.get(block_type or "")
    if renderer is not None:
        return renderer(block)
    if block_type in PLACEHOLDER_TYPES:
        return placeholder_comment(block)
    raise ValueError(f"Unknown block type: {block_type!r}")


def blocks_to_html(document: Sequence[BaseBlock]) -> str:
    """Render a document as editor HTML, one block per line."""
    return "\n".join(block_to_html(block) for block in document)


def find_unsupported_blocks(document: Sequence[BaseBlock]) -> list[BaseBlock]:
    """Blocks that a save through the visual editor would drop."""
    return [block for block in document if getattr(block, "type", None) in PLACEHOLDER_TYPES]
