"""
Tests for the visual editor bridge.

Test assertions:
- HTML fragments become blocks in document order
- Editor block types survive an HTML round trip (ids aside)
- Advanced block types become placeholders and are dropped on the way back
"""

from __future__ import annotations

import pytest

from src.components.html_convert import (
    PLACEHOLDER_TYPES,
    BlocksToHtmlInput,
    HtmlToBlocksInput,
    block_to_html,
    blocks_to_html,
    find_unsupported_blocks,
    html_to_blocks,
    placeholder_comment,
    run,
    run_blocks_to_html,
)
from src.domain.blocks import BLOCK_MODELS, block_to_dict, parse_block, parse_document


def _without_ids(blocks) -> list[dict]:
    result = []
    for block in blocks:
        data = block_to_dict(block)
        data.pop("id")
        result.append(data)
    return result


# --- HTML -> blocks ---


class TestHtmlToBlocks:
    """Forward conversion."""

    @pytest.mark.parametrize("html", ["", "   ", "\n\n"])
    def test_empty_input(self, html: str) -> None:
        assert html_to_blocks(html) == []

    def test_headings(self) -> None:
        blocks = html_to_blocks("<h1>One</h1><h2>Two</h2><h3>Three</h3><h4>Four</h4>")
        assert [(b.type, b.level, b.content) for b in blocks] == [
            ("heading", 1, "One"),
            ("heading", 2, "Two"),
            ("heading", 3, "Three"),
            ("heading", 4, "Four"),
        ]

    def test_paragraph_keeps_inline_markup(self) -> None:
        blocks = html_to_blocks('<p>Hello <strong>bold</strong> <a href="/x">link</a></p>')
        assert len(blocks) == 1
        assert blocks[0].type == "paragraph"
        assert blocks[0].content == 'Hello <strong>bold</strong> <a href="/x">link</a>'

    def test_empty_paragraph_skipped(self) -> None:
        assert html_to_blocks("<p>   </p>") == []

    def test_lists(self) -> None:
        blocks = html_to_blocks("<ul><li>a</li><li>b</li></ul><ol><li>1</li></ol>")
        assert [(b.style, b.items) for b in blocks] == [
            ("unordered", ["a", "b"]),
            ("ordered", ["1"]),
        ]

    def test_code_with_language(self) -> None:
        blocks = html_to_blocks(
            '<pre data-filename="app.py"><code class="language-python">x = 1 &lt; 2</code></pre>'
        )
        assert blocks[0].type == "code"
        assert blocks[0].language == "python"
        assert blocks[0].code == "x = 1 < 2"
        assert blocks[0].filename == "app.py"

    def test_code_without_language(self) -> None:
        blocks = html_to_blocks("<pre>plain text</pre>")
        assert blocks[0].language == "plaintext"
        assert blocks[0].code == "plain text"

    def test_image(self) -> None:
        blocks = html_to_blocks('<img src="/a.png" alt="A" data-caption="Cap">')
        assert (blocks[0].src, blocks[0].alt, blocks[0].caption) == ("/a.png", "A", "Cap")

    def test_quote_and_divider(self) -> None:
        blocks = html_to_blocks('<blockquote data-author="Ada">Think</blockquote><hr>')
        assert blocks[0].type == "quote"
        assert (blocks[0].content, blocks[0].author) == ("Think", "Ada")
        assert blocks[1].type == "divider"

    def test_wrappers_are_recursed(self) -> None:
        blocks = html_to_blocks("<div><section><p>a</p></section><p>b</p></div>")
        assert [b.content for b in blocks] == ["a", "b"]

    def test_bare_text_becomes_escaped_paragraph(self) -> None:
        blocks = html_to_blocks("1 < 2 & more")
        assert blocks[0].type == "paragraph"
        assert blocks[0].content == "1 &lt; 2 &amp; more"

    def test_comments_and_scripts_ignored(self) -> None:
        html = "<!-- note --><script>alert(1)</script><style>p{}</style><p>kept</p>"
        blocks = html_to_blocks(html)
        assert [b.content for b in blocks] == ["kept"]

    def test_malformed_html_does_not_raise(self) -> None:
        blocks = html_to_blocks("<p>open <b>bold<p>next</div></span>")
        assert blocks
        assert all(b.type == "paragraph" for b in blocks)

    def test_ids_are_unique(self) -> None:
        blocks = html_to_blocks("".join(f"<p>{i}</p>" for i in range(50)))
        assert len({b.id for b in blocks}) == 50


# --- blocks -> HTML ---


class TestBlocksToHtml:
    """Reverse conversion."""

    def test_code_is_escaped(self) -> None:
        block = parse_block({"id": "1", "type": "code", "language": "html", "code": "<b>&</b>"})
        assert block_to_html(block) == (
            '<pre><code class="language-html">&lt;b&gt;&amp;&lt;/b&gt;</code></pre>'
        )

    def test_attributes_are_escaped(self) -> None:
        block = parse_block({"id": "1", "type": "image", "src": '/a".png', "alt": "<x>"})
        html = block_to_html(block)
        assert 'src="/a&quot;.png"' in html
        assert 'alt="&lt;x&gt;"' in html

    def test_callout(self) -> None:
        block = parse_block(
            {"id": "1", "type": "callout", "variant": "warning", "title": "Note", "content": "Careful"}
        )
        assert block_to_html(block) == (
            '<div class="callout callout-warning"><strong>Note</strong>: Careful</div>'
        )

    def test_one_block_per_line(self) -> None:
        document = parse_document(
            [{"id": "1", "type": "divider"}, {"id": "2", "type": "paragraph", "content": "x"}]
        )
        assert blocks_to_html(document) == "<hr />\n<p>x</p>"

    def test_placeholder_for_advanced_block(self) -> None:
        block = parse_block({"id": "m1", "type": "math", "formula": "x^2"})
        assert block_to_html(block) == placeholder_comment(block)
        assert "math block (ID: m1)" in block_to_html(block)

    def test_placeholder_id_cannot_close_comment(self) -> None:
        block = parse_block({"id": "a-->b", "type": "divider"}).model_copy(update={"type": "math"})
        assert "-->b" not in placeholder_comment(block)


class TestRoundTrip:
    """HTML round trips through the visual editor."""

    def test_editor_blocks_survive(self) -> None:
        document = parse_document(
            [
                {"id": "1", "type": "heading", "level": 2, "content": "Title"},
                {"id": "2", "type": "paragraph", "content": "Some <em>text</em>"},
                {"id": "3", "type": "code", "language": "python", "code": "if a < b:\n    pass"},
                {"id": "4", "type": "image", "src": "/i.png", "alt": "I", "caption": "C"},
                {"id": "5", "type": "quote", "content": "Q", "author": "A"},
                {"id": "6", "type": "list", "style": "ordered", "items": ["x", "y"]},
                {"id": "7", "type": "divider"},
            ]
        )
        back = html_to_blocks(blocks_to_html(document))
        assert _without_ids(back) == _without_ids(document)

    def test_advanced_blocks_are_dropped(self) -> None:
        document = parse_document(
            [
                {"id": "1", "type": "paragraph", "content": "before"},
                {"id": "2", "type": "math", "formula": "E = mc^2"},
                {"id": "3", "type": "terminal", "commands": [{"command": "ls"}]},
                {"id": "4", "type": "paragraph", "content": "after"},
            ]
        )
        back = html_to_blocks(blocks_to_html(document))
        assert [b.content for b in back] == ["before", "after"]

    def test_unsupported_blocks_reported(self) -> None:
        document = parse_document(
            [
                {"id": "1", "type": "paragraph", "content": "p"},
                {"id": "2", "type": "math", "formula": "x"},
            ]
        )
        assert [b.id for b in find_unsupported_blocks(document)] == ["2"]

        output = run_blocks_to_html(BlocksToHtmlInput(document=document))
        assert output.lossy is True
        assert output.unsupported == [("math", "2")]


class TestPlaceholderTypes:
    def test_exactly_the_advanced_types(self) -> None:
        assert len(PLACEHOLDER_TYPES) == 12
        assert "paragraph" not in PLACEHOLDER_TYPES
        assert PLACEHOLDER_TYPES <= set(BLOCK_MODELS)


class TestRun:
    def test_dispatch(self) -> None:
        forward = run(HtmlToBlocksInput(html="<p>a</p>"))
        assert forward.success
        assert forward.document[0].content == "a"

        reverse = run(BlocksToHtmlInput(document=forward.document))
        assert reverse.html == "<p>a</p>"
        assert reverse.lossy is False

    def test_unknown_input(self) -> None:
        with pytest.raises(ValueError):
            run("nope")  # type: ignore[arg-type]
