"""Tests for markup-to-text conversion of message content."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from pagelogue.lib.text import normalize_content
from pagelogue.sources.content import code_language, extract_rich_text


def _text(html: str) -> str:
    soup = BeautifulSoup(f"<div>{html}</div>", "html.parser")
    return normalize_content(extract_rich_text(soup.div))


class TestCodeBlocks:
    def test_language_from_class(self):
        assert _text('<pre><code class="language-python">x = 1</code></pre>') == "```python\nx = 1\n```"

    def test_language_from_data_attribute(self):
        assert _text('<pre data-language="Rust"><code>fn main() {}</code></pre>') == "```rust\nfn main() {}\n```"

    def test_unknown_language_leaves_fence_bare(self):
        assert _text("<pre><code>plain</code></pre>") == "```\nplain\n```"

    def test_code_whitespace_is_verbatim(self):
        text = _text("<p>Before</p><pre><code>a    b\n\n\n\nc</code></pre>")
        assert text == "Before\n\n```\na    b\n\n\n\nc\n```"

    def test_inline_code_gets_backticks(self):
        assert _text("<p>Call <code>run()</code> now</p>") == "Call `run()` now"

    def test_code_language_helper(self):
        soup = BeautifulSoup('<pre><code class="hljs lang-go">x</code></pre>', "html.parser")
        assert code_language(soup.pre) == "go"


class TestMath:
    def test_inline_math_from_data_attribute(self):
        assert _text('<p>Area is <span class="math-inline" data-math="\\pi r^2">πr²</span></p>') == "Area is $\\pi r^2$"

    def test_display_math_from_tex_annotation(self):
        html = (
            '<span class="katex-display"><span class="katex"><math><semantics>'
            '<annotation encoding="application/x-tex">E = mc^2</annotation>'
            "</semantics></math></span></span>"
        )
        assert _text(html) == "$$E = mc^2$$"


class TestStructure:
    def test_unordered_list(self):
        assert _text("<ul><li>One</li><li>Two</li></ul>") == "- One\n- Two"

    def test_ordered_list(self):
        assert _text("<ol><li>First</li><li>Second</li></ol>") == "1. First\n2. Second"

    def test_blockquote(self):
        assert _text("<blockquote><p>Quoted line</p></blockquote>") == "> Quoted line"

    def test_line_break(self):
        assert _text("<p>line one<br>line two</p>") == "line one\nline two"

    def test_table_rows(self):
        assert _text("<table><tr><th>a</th><th>b</th></tr><tr><td>1</td><td>2</td></tr></table>") == "a | b\n1 | 2"

    def test_paragraphs_are_separated(self):
        assert _text("<p>First</p><p>Second</p>") == "First\n\nSecond"


class TestSkipped:
    @pytest.mark.parametrize(
        "html",
        [
            "<p>Hello<script>alert(1)</script> world</p>",
            "<p>Hello<button>Copy code</button> world</p>",
            '<p>Hello<span class="sr-only">Copied!</span> world</p>',
            "<p>Hello<!-- hidden --> world</p>",
            "<p>Hello<style>p { color: red }</style> world</p>",
        ],
    )
    def test_chrome_is_dropped(self, html):
        assert _text(html) == "Hello world"

    def test_collapses_markup_whitespace(self):
        assert _text("<p>\n   spaced\n   out\n</p>") == "spaced out"

    def test_pre_wrap_style_keeps_newlines(self):
        assert _text('<div style="white-space: pre-wrap">one\ntwo</div>') == "one\ntwo"
