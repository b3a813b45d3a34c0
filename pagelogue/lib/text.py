"""Whitespace normalization for extracted message text and titles.

Fenced code blocks are kept verbatim; everything outside them is prose
and gets its whitespace canonicalized. Both functions are idempotent.
"""

from __future__ import annotations

import re

MAX_TITLE_LENGTH = 200

_FENCE_RE = re.compile(r"(```[^\n`]*\n.*?\n```)", re.DOTALL)
_HSPACE_RE = re.compile(r"[^\S\n]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_ANY_SPACE_RE = re.compile(r"\s+")


def _normalize_prose(text: str) -> str:
    text = _HSPACE_RE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE_RE.sub("\n", text)
    return _EXCESS_NEWLINES_RE.sub("\n\n", text)


def normalize_content(text: str) -> str:
    """Canonicalize message whitespace.

    Outside fenced code: runs of horizontal whitespace become one space,
    spaces hugging a newline are removed, three or more newlines collapse
    to two. Line endings are unified and the ends trimmed.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    parts = _FENCE_RE.split(text)
    # re.split with one capture group alternates prose, fence, prose, ...
    normalized = [part if i % 2 else _normalize_prose(part) for i, part in enumerate(parts)]
    return "".join(normalized).strip()


def normalize_title(title: str | None) -> str:
    """Collapse all whitespace in a title to single spaces, trim, cap length."""
    if not title:
        return ""
    collapsed = _ANY_SPACE_RE.sub(" ", title).strip()
    return collapsed[:MAX_TITLE_LENGTH].rstrip()


__all__ = ["MAX_TITLE_LENGTH", "normalize_content", "normalize_title"]
