"""Turn a message's markup subtree into plain text.

Fenced code blocks keep their text verbatim (with a language tag when one
is detectable), math keeps its TeX source between ``$``/``$$`` delimiters,
lists and blockquotes become ``- ``/``1. ``/``> `` lines, and everything
else is reduced to its text with block elements separated by newlines.
Whitespace in ordinary text nodes collapses the way a browser renders
it, except under ``white-space: pre*`` containers where it is kept.

The output still needs `pagelogue.lib.text.normalize_content`.
"""

from __future__ import annotations

import re

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString

SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "button", "svg", "textarea", "form", "nav"})
BLOCK_TAGS = frozenset(
    {
        "div", "section", "article", "main", "header", "footer", "figure", "figcaption",
        "details", "summary", "table", "dl", "dt", "dd",
    }
)
PARAGRAPH_TAGS = frozenset({"p", "h1", "h2", "h3", "h4", "h5", "h6"})
MATH_CLASSES = frozenset({"katex", "katex-display", "math", "math-inline", "math-display", "latex"})
DISPLAY_MATH_CLASSES = frozenset({"katex-display", "math-display"})

_LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang)-([\w+#.-]+)$")
_COLLAPSE_RE = re.compile(r"\s+")
_PRE_STYLE_RE = re.compile(r"white-space\s*:\s*pre")


def _classes(node: Tag) -> list[str]:
    return [str(cls) for cls in node.get("class") or []]


def _is_math(node: Tag) -> bool:
    if node.name in ("math", "mjx-container") or node.has_attr("data-math"):
        return True
    return any(cls in MATH_CLASSES for cls in _classes(node))


def _preserves_whitespace(node: Tag) -> bool:
    if any(cls.startswith("whitespace-pre") for cls in _classes(node)):
        return True
    style = node.get("style")
    return isinstance(style, str) and _PRE_STYLE_RE.search(style) is not None


def code_language(pre: Tag) -> str:
    """Best-effort language of a code block, or ''."""
    candidates = [pre]
    code = pre.find("code")
    if isinstance(code, Tag):
        candidates.insert(0, code)
    for node in candidates:
        lang = node.get("data-language")
        if isinstance(lang, str) and lang.strip():
            return lang.strip().lower()
        for cls in _classes(node):
            match = _LANGUAGE_CLASS_RE.match(cls)
            if match:
                return match.group(1).lower()
    return ""


def math_source(node: Tag) -> str:
    annotation = node.find("annotation", attrs={"encoding": "application/x-tex"})
    if isinstance(annotation, Tag):
        return annotation.get_text().strip()
    data_math = node.get("data-math")
    if isinstance(data_math, str) and data_math.strip():
        return data_math.strip()
    return node.get_text().strip()


class _TextBuilder:
    def __init__(self) -> None:
        self.parts: list[str] = []

    def text(self) -> str:
        return "".join(self.parts)

    def render(self, node: Tag, *, preserve: bool = False) -> None:
        for child in node.children:
            if isinstance(child, PreformattedString):
                # comments, CDATA, doctype, processing instructions
                continue
            if isinstance(child, NavigableString):
                value = str(child)
                self.parts.append(value if preserve else _COLLAPSE_RE.sub(" ", value))
            elif isinstance(child, Tag):
                self.render_tag(child, preserve=preserve)

    def render_tag(self, node: Tag, *, preserve: bool) -> None:
        name = (node.name or "").lower()
        if name in SKIP_TAGS or "sr-only" in _classes(node):
            return
        if _is_math(node):
            source = math_source(node)
            if source:
                display = any(cls in DISPLAY_MATH_CLASSES for cls in _classes(node)) or node.get("display") == "block"
                self.parts.append(f"\n\n$${source}$$\n\n" if display else f"${source}$")
            return
        if name == "pre":
            self.parts.append(self.fenced_code(node))
            return
        if name == "code":
            self.parts.append(f"`{node.get_text()}`")
            return
        if name == "br":
            self.parts.append("\n")
            return
        if name == "hr":
            self.parts.append("\n\n---\n\n")
            return
        if name in ("ul", "ol"):
            self.parts.append(f"\n\n{self.list_text(node, ordered=name == 'ol')}\n\n")
            return
        if name == "blockquote":
            self.parts.append(f"\n\n{self.quote_text(node)}\n\n")
            return
        if name == "tr":
            cells = [_subtree_text(cell) for cell in node.find_all(["td", "th"], recursive=False)]
            self.parts.append(" | ".join(cells) + "\n")
            return

        preserve = preserve or _preserves_whitespace(node)
        if name in PARAGRAPH_TAGS:
            self.parts.append("\n\n")
            self.render(node, preserve=preserve)
            self.parts.append("\n\n")
        elif name in BLOCK_TAGS:
            self.parts.append("\n")
            self.render(node, preserve=preserve)
            self.parts.append("\n")
        else:
            self.render(node, preserve=preserve)

    def fenced_code(self, pre: Tag) -> str:
        code = pre.find("code")
        body = (code if isinstance(code, Tag) else pre).get_text().strip("\n")
        return f"\n\n```{code_language(pre)}\n{body}\n```\n\n"

    def list_text(self, node: Tag, *, ordered: bool) -> str:
        lines = []
        items = node.find_all("li", recursive=False)
        for number, item in enumerate(items, start=1):
            prefix = f"{number}. " if ordered else "- "
            lines.append(prefix + _subtree_text(item))
        return "\n".join(lines)

    def quote_text(self, node: Tag) -> str:
        inner = _subtree_text(node)
        return "\n".join(f"> {line}".rstrip() for line in inner.split("\n"))


def _subtree_text(node: Tag) -> str:
    builder = _TextBuilder()
    builder.render(node)
    return re.sub(r"\n{3,}", "\n\n", builder.text()).strip()


def extract_rich_text(node: Tag) -> str:
    """Render a content subtree to text; see module docstring."""
    builder = _TextBuilder()
    builder.render(node, preserve=_preserves_whitespace(node))
    return builder.text()


__all__ = ["extract_rich_text", "code_language", "math_source"]
