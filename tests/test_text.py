"""Tests for whitespace normalization of titles and message content.

Key properties tested:
1. Idempotence - normalizing twice equals normalizing once
2. Fenced code blocks survive untouched
3. Titles collapse all whitespace and are capped
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from pagelogue.lib.text import MAX_TITLE_LENGTH, normalize_content, normalize_title

prose = st.text(alphabet=st.characters(blacklist_characters="`", blacklist_categories=("Cs",)), max_size=200)


@given(prose)
def test_content_normalization_is_idempotent(text: str):
    once = normalize_content(text)
    assert normalize_content(once) == once


@given(st.text(max_size=200))
def test_title_normalization_is_idempotent(text: str):
    once = normalize_title(text)
    assert normalize_title(once) == once


def test_fenced_examples_are_idempotent():
    samples = [
        "Intro   text\n\n\n\n```python\ndef f():\n        return  1\n```\n\n\nOutro  ",
        "```\n  indented\n\n\n\nblock\n```",
        "a\r\nb\r\n\r\n\r\n\r\nc",
    ]
    for sample in samples:
        once = normalize_content(sample)
        assert normalize_content(once) == once


def test_collapses_horizontal_whitespace():
    assert normalize_content("a  \t b") == "a b"


def test_collapses_excess_newlines_to_two():
    assert normalize_content("a\n\n\n\n\nb") == "a\n\nb"


def test_trims_ends_and_line_edges():
    assert normalize_content("  first  \n  second  ") == "first\nsecond"


def test_unifies_line_endings():
    assert normalize_content("a\r\nb\rc") == "a\nb\nc"


def test_fenced_code_is_kept_verbatim():
    text = "Look:\n```python\ndef f():\n    return  1\n\n\n\n```"
    assert normalize_content(text) == text


def test_whitespace_only_becomes_empty():
    assert normalize_content(" \n\t \n ") == ""
    assert normalize_content("") == ""


def test_title_example():
    assert normalize_title("  My   Chat  ") == "My Chat"


def test_title_newlines_and_tabs_collapse():
    assert normalize_title("Line\none\tand two") == "Line one and two"


def test_title_is_capped():
    title = normalize_title("word " * 100)
    assert len(title) <= MAX_TITLE_LENGTH
    assert not title.endswith(" ")
