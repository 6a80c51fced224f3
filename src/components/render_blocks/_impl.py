"""
Content block SSR renderer.

Every block type has exactly one renderer in ``RENDERERS``. Plain text fields
are escaped; fields the editor stores as inline markup (paragraph, heading,
quote, list items, callout and banner content) go through the rich text
sanitizer instead.
"""

from __future__ import annotations

import difflib
import html
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from src.components.richtext import (
    RichTextConfig,
    RichTextValidationError,
    build_link_rel,
    extract_text,
    is_safe_url,
    sanitize_inline_html,
)
from src.domain.blocks import (
    ApiBlock,
    BannerBlock,
    BaseBlock,
    CalloutBlock,
    CodeBlock,
    ComparisonBlock,
    DiffBlock,
    DividerBlock,
    EmbedBlock,
    FileTreeBlock,
    FileTreeItem,
    FlowchartBlock,
    FlowchartNode,
    HeadingBlock,
    ImageBlock,
    ListBlock,
    MathBlock,
    ParagraphBlock,
    QuizBlock,
    QuoteBlock,
    StatsBlock,
    TableBlock,
    TerminalBlock,
)

YOUTUBE_ID = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\s]+)")
SAFE_COLOR = re.compile(r"^(#[0-9a-fA-F]{3,8}|[a-zA-Z]+)$")


# --- Configuration ---


@dataclass(frozen=True)
class RenderConfig:
    """Rendering configuration."""

    rich_text_config: RichTextConfig = field(default_factory=RichTextConfig)

    wrap_in_article: bool = False
    add_heading_ids: bool = True
    code_block_class: str = "code-block"
    image_loading: str = "lazy"  # lazy, eager


DEFAULT_RENDER_CONFIG = RenderConfig()


@dataclass
class _RenderContext:
    config: RenderConfig
    warnings: list[RichTextValidationError] = field(default_factory=list)
    heading_ids: set[str] = field(default_factory=set)

    def rich(self, content: str) -> str:
        sanitized, errors = sanitize_inline_html(content, self.config.rich_text_config)
        self.warnings.extend(errors)
        return sanitized


# --- Helpers ---


def _escape(text: Any) -> str:
    return html.escape(str(text))


def _slugify(text: str) -> str:
    """Create URL-safe slug from text."""
    slug = text.lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _unique_slug(text: str, taken: set[str]) -> str:
    """Slug for text, suffixed -2, -3... when already taken in this document."""
    base = _slugify(text)
    if not base:
        return ""
    slug, n = base, 1
    while slug in taken:
        n += 1
        slug = f"{base}-{n}"
    taken.add(slug)
    return slug


def _color_style(color: str | None) -> str:
    if color and SAFE_COLOR.match(color):
        return f' style="color: {color}"'
    return ""


def _caption(text: str | None) -> str:
    return f"<figcaption>{_escape(text)}</figcaption>" if text else ""


# --- Editor block renderers ---


def render_paragraph(block: ParagraphBlock, ctx: _RenderContext) -> str:
    return f"<p>{ctx.rich(block.content)}</p>"


def render_heading(block: HeadingBlock, ctx: _RenderContext) -> str:
    level = block.level
    content = ctx.rich(block.content)

    if ctx.config.add_heading_ids:
        heading_id = _unique_slug(extract_text(block.content), ctx.heading_ids)
        if heading_id:
            return f'<h{level} id="{heading_id}">{content}</h{level}>'

    return f"<h{level}>{content}</h{level}>"


def render_code(block: CodeBlock, ctx: _RenderContext) -> str:
    language = _escape(block.language or "plaintext")
    code = (
        f'<pre class="{_escape(ctx.config.code_block_class)}">'
        f'<code class="language-{language}">{_escape(block.code)}</code></pre>'
    )
    if block.filename:
        return (
            f'<figure class="blog-code">'
            f'<figcaption class="code-filename">{_escape(block.filename)}</figcaption>'
            f"{code}</figure>"
        )
    return code


def render_image(block: ImageBlock, ctx: _RenderContext) -> str:
    if not block.src or not is_safe_url(block.src, ctx.config.rich_text_config):
        return ""  # Skip unsafe or empty images

    img = (
        f'<img src="{_escape(block.src)}" alt="{_escape(block.alt)}" '
        f'loading="{_escape(ctx.config.image_loading)}">'
    )
    return f'<figure class="blog-image">{img}{_caption(block.caption)}</figure>'


def render_quote(block: QuoteBlock, ctx: _RenderContext) -> str:
    cite = f"<cite>{_escape(block.author)}</cite>" if block.author else ""
    return f'<blockquote class="blog-quote"><p>{ctx.rich(block.content)}</p>{cite}</blockquote>'


def render_list(block: ListBlock, ctx: _RenderContext) -> str:
    tag = "ol" if block.style == "ordered" else "ul"
    items = "".join(f"<li>{ctx.rich(item)}</li>" for item in block.items)
    return f"<{tag}>{items}</{tag}>"


def render_divider(block: DividerBlock, ctx: _RenderContext) -> str:
    return "<hr>"


def render_callout(block: CalloutBlock, ctx: _RenderContext) -> str:
    title = f'<strong class="callout-title">{_escape(block.title)}</strong>' if block.title else ""
    return (
        f'<div class="callout callout-{block.variant}" role="note">'
        f'{title}<div class="callout-content">{ctx.rich(block.content)}</div></div>'
    )


# --- Advanced block renderers ---


def render_embed(block: EmbedBlock, ctx: _RenderContext) -> str:
    if block.provider == "youtube":
        match = YOUTUBE_ID.search(block.url)
        if match:
            video_id = _escape(match.group(1))
            return (
                f'<div class="blog-embed embed-youtube">'
                f'<iframe src="https://www.youtube.com/embed/{video_id}" '
                f'allow="accelerometer; autoplay; clipboard-write; encrypted-media; '
                f'gyroscope; picture-in-picture" allowfullscreen></iframe></div>'
            )

    if not is_safe_url(block.url, ctx.config.rich_text_config):
        return ""

    provider = _escape(block.provider or "other")
    rel = build_link_rel(ctx.config.rich_text_config)
    return (
        f'<div class="blog-embed embed-{provider}">'
        f'<a href="{_escape(block.url)}" target="_blank" rel="{rel}">{_escape(block.url)}</a></div>'
    )


def render_table(block: TableBlock, ctx: _RenderContext) -> str:
    classes = "blog-table striped" if block.striped else "blog-table"
    caption = f"<caption>{_escape(block.caption)}</caption>" if block.caption else ""
    head = "".join(
        f"<th{_color_style(col.color)}>{_escape(col.header)}</th>" for col in block.columns
    )
    body = "".join(
        "<tr>" + "".join(f"<td>{_escape(row.get(col.key, ''))}</td>" for col in block.columns) + "</tr>"
        for row in block.rows
    )
    return (
        f'<table class="{classes}">{caption}'
        f"<thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"
    )


def render_quiz(block: QuizBlock, ctx: _RenderContext) -> str:
    questions = []
    for q in block.questions:
        options = "".join(
            f'<li class="quiz-option" data-index="{i}">{_escape(opt)}</li>'
            for i, opt in enumerate(q.options)
        )
        explanation = (
            f'<details class="quiz-explanation"><summary>Explanation</summary>'
            f"<p>{_escape(q.explanation)}</p></details>"
            if q.explanation
            else ""
        )
        questions.append(
            f'<li class="quiz-question" data-correct-index="{q.correct_index}">'
            f'<p>{_escape(q.question)}</p><ol class="quiz-options" type="A">{options}</ol>'
            f"{explanation}</li>"
        )
    return (
        f'<section class="blog-quiz"><h3>{_escape(block.title)}</h3>'
        f'<ol class="quiz-questions">{"".join(questions)}</ol></section>'
    )


MERMAID_SHAPES = {
    "start": ('(["', '"])'),
    "end": ('(["', '"])'),
    "decision": ('{"', '"}'),
    "data": ('[/"', '"/]'),
}


def _mermaid_label(text: str) -> str:
    return text.replace('"', "#quot;")


def flowchart_source(block: FlowchartBlock) -> str:
    """
    Mermaid source for a flowchart block.

    Node ids are replaced with generated ones (n0, n1, ...) since authored
    ids may be Mermaid keywords such as ``end`` or contain spaces. Edge
    endpoints that name no node become plain nodes labelled with that id.
    """
    ids: dict[str, str] = {}
    nodes: list[tuple[str, FlowchartNode | None]] = []

    def ref(node_id: str, node: FlowchartNode | None = None) -> str:
        if node_id not in ids:
            ids[node_id] = f"n{len(ids)}"
            nodes.append((node_id, node))
        return ids[node_id]

    for node in block.nodes:
        ref(node.id, node)
    for edge in block.edges:
        ref(edge.from_)
        ref(edge.to)

    lines = [f"flowchart {block.direction or 'TB'}"]
    for node_id, node in nodes:
        if node is None:
            lines.append(f'    {ids[node_id]}["{_mermaid_label(node_id)}"]')
            continue
        opening, closing = MERMAID_SHAPES.get(node.type or "process", ('["', '"]'))
        lines.append(f"    {ids[node_id]}{opening}{_mermaid_label(node.label)}{closing}")

    for edge in block.edges:
        source, target = ids[edge.from_], ids[edge.to]
        if edge.label:
            lines.append(f'    {source} -->|"{_mermaid_label(edge.label)}"| {target}')
        else:
            lines.append(f"    {source} --> {target}")
    return "\n".join(lines)


def render_flowchart(block: FlowchartBlock, ctx: _RenderContext) -> str:
    return (
        f'<figure class="blog-flowchart">'
        f'<pre class="mermaid">{_escape(flowchart_source(block))}</pre>'
        f"{_caption(block.title)}</figure>"
    )


def render_math(block: MathBlock, ctx: _RenderContext) -> str:
    formula = _escape(block.formula)
    if block.inline:
        return f'<span class="blog-math math-inline">\\({formula}\\)</span>'
    return (
        f'<figure class="blog-math"><div class="math-display">\\[{formula}\\]</div>'
        f"{_caption(block.caption)}</figure>"
    )


def diff_lines(before: str, after: str) -> list[tuple[str, str]]:
    """Line diff as (marker, line) pairs, marker in "+", "-", " "."""
    result = []
    for line in difflib.ndiff(before.splitlines(), after.splitlines()):
        marker, text = line[:1], line[2:]
        if marker == "?":
            continue
        result.append((marker, text))
    return result


def render_diff(block: DiffBlock, ctx: _RenderContext) -> str:
    css = {"+": "diff-added", "-": "diff-removed", " ": "diff-context"}
    lines = "".join(
        f'<span class="{css[marker]}">{_escape(marker)} {_escape(text)}</span>\n'
        for marker, text in diff_lines(block.before, block.after)
    )
    language = f' data-language="{_escape(block.language)}"' if block.language else ""
    return (
        f'<figure class="blog-diff"{language}>{_caption(block.filename)}'
        f"<pre><code>{lines}</code></pre></figure>"
    )


def render_terminal(block: TerminalBlock, ctx: _RenderContext) -> str:
    title = f'<div class="terminal-title">{_escape(block.title)}</div>' if block.title else ""
    parts = []
    for cmd in block.commands:
        parts.append(f'<span class="terminal-prompt">$</span> {_escape(cmd.command)}')
        if cmd.output:
            parts.append(f'<span class="terminal-output">{_escape(cmd.output)}</span>')
    return f'<div class="blog-terminal">{title}<pre><code>{chr(10).join(parts)}</code></pre></div>'


def render_api(block: ApiBlock, ctx: _RenderContext) -> str:
    method = block.method
    parts = [
        f'<div class="api-signature"><span class="api-method api-method-{method.lower()}">'
        f"{method}</span> <code>{_escape(block.endpoint)}</code></div>"
    ]
    if block.description:
        parts.append(f"<p>{_escape(block.description)}</p>")
    if block.params:
        rows = "".join(
            f"<tr><td><code>{_escape(p.name)}</code></td><td>{_escape(p.type)}</td>"
            f"<td>{'yes' if p.required else 'no'}</td><td>{_escape(p.description or '')}</td></tr>"
            for p in block.params
        )
        parts.append(
            '<table class="api-params"><thead><tr><th>Name</th><th>Type</th>'
            f"<th>Required</th><th>Description</th></tr></thead><tbody>{rows}</tbody></table>"
        )
    if block.body:
        parts.append(f'<h4>Request body</h4><pre><code class="language-json">{_escape(block.body)}</code></pre>')
    if block.response:
        parts.append(f'<h4>Response</h4><pre><code class="language-json">{_escape(block.response)}</code></pre>')
    return f'<section class="blog-api">{"".join(parts)}</section>'


def _filetree_items(items: Sequence[FileTreeItem]) -> str:
    rendered = []
    for item in items:
        classes = f"filetree-{item.type}"
        if item.highlight:
            classes += " highlight"
        children = _filetree_items(item.children) if item.children else ""
        rendered.append(f'<li class="{classes}">{_escape(item.name)}{children}</li>')
    return f"<ul>{''.join(rendered)}</ul>"


def render_filetree(block: FileTreeBlock, ctx: _RenderContext) -> str:
    title = f'<div class="filetree-title">{_escape(block.title)}</div>' if block.title else ""
    return f'<div class="blog-filetree">{title}{_filetree_items(block.items)}</div>'


def render_banner(block: BannerBlock, ctx: _RenderContext) -> str:
    icon = f'<span class="banner-icon">{_escape(block.icon)}</span>' if block.icon else ""
    content = f"<p>{ctx.rich(block.content)}</p>" if block.content else ""
    return (
        f'<div class="blog-banner banner-{block.variant}" role="status">'
        f"{icon}<strong>{_escape(block.title)}</strong>{content}</div>"
    )


def render_stats(block: StatsBlock, ctx: _RenderContext) -> str:
    columns = block.columns or min(max(len(block.items), 2), 4)
    items = "".join(
        f'<div class="stat"><span class="stat-value"{_color_style(item.color)}>'
        f"{_escape(item.prefix or '')}{_escape(item.value)}{_escape(item.suffix or '')}</span>"
        f'<span class="stat-label">{_escape(item.label)}</span></div>'
        for item in block.items
    )
    return f'<div class="blog-stats stats-cols-{columns}">{items}</div>'


def render_comparison(block: ComparisonBlock, ctx: _RenderContext) -> str:
    def column(side: str, title: str, items: list[str], color: str | None) -> str:
        lis = "".join(f"<li>{_escape(item)}</li>" for item in items)
        return (
            f'<div class="comparison-{side}"><h4{_color_style(color)}>{_escape(title)}</h4>'
            f"<ul>{lis}</ul></div>"
        )

    return (
        '<div class="blog-comparison">'
        + column("left", block.left_title, block.left_items, block.left_color)
        + column("right", block.right_title, block.right_items, block.right_color)
        + "</div>"
    )


# block type -> renderer; covers every type in BLOCK_TYPES
RENDERERS: dict[str, Callable[[Any, _RenderContext], str]] = {
    "paragraph": render_paragraph,
    "heading": render_heading,
    "code": render_code,
    "image": render_image,
    "quote": render_quote,
    "list": render_list,
    "divider": render_divider,
    "callout": render_callout,
    "embed": render_embed,
    "table": render_table,
    "quiz": render_quiz,
    "flowchart": render_flowchart,
    "math": render_math,
    "diff": render_diff,
    "terminal": render_terminal,
    "api": render_api,
    "filetree": render_filetree,
    "banner": render_banner,
    "stats": render_stats,
    "comparison": render_comparison,
}


# --- Document renderer ---


class BlockRenderer:
    """Renders documents to HTML and collects sanitizer warnings."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config or DEFAULT_RENDER_CONFIG

    @property
    def config(self) -> RenderConfig:
        return self._config

    def render(self, document: Sequence[BaseBlock]) -> tuple[str, list[RichTextValidationError]]:
        ctx = _RenderContext(config=self._config)
        parts = [self._render_block(block, ctx) for block in document]
        body = "\n".join(part for part in parts if part)
        if self._config.wrap_in_article:
            body = f'<article class="blog-content">\n{body}\n</article>'
        return body, ctx.warnings

    def _render_block(self, block: BaseBlock, ctx: _RenderContext) -> str:
        block_type = getattr(block, "type", None)
        renderer = RENDERERS.get(block_type) if isinstance(block_type, str) else None
        if renderer is None:
            raise ValueError(f"No renderer for block type: {block_type!r}")
        return renderer(block, ctx)

    def extract_headings(self, document: Sequence[BaseBlock]) -> list[dict[str, Any]]:
        """Headings in document order, for a table of contents."""
        headings = []
        taken: set[str] = set()
        for block in document:
            if isinstance(block, HeadingBlock):
                text = extract_text(block.content).strip()
                heading_id = _unique_slug(text, taken)
                headings.append({"level": block.level, "text": text, "id": heading_id})
        return headings


def render_document(
    document: Sequence[BaseBlock],
    config: RenderConfig | None = None,
) -> str:
    """Render a document to HTML."""
    body, _ = BlockRenderer(config).render(document)
    return body
