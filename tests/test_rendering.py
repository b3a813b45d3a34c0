"""Tests for the four export renderers."""

from __future__ import annotations

import csv
import io

import pytest

from pagelogue.errors import UnsupportedFormatError
from pagelogue.lib.json import loads
from pagelogue.lib.models import ConversationExport
from pagelogue.lib.roles import Role
from pagelogue.rendering import create_renderer, list_formats, render_export, suggested_filename
from pagelogue.types import ExportFormat
from tests.factories import make_export


@pytest.fixture
def export():
    return make_export(
        (Role.USER, 'She said "hi", then left.\nSecond line'),
        (Role.ASSISTANT, "Here is code:\n\n```python\nprint(1)\n```"),
        title="Quotes & code",
    )


# =============================================================================
# Registry
# =============================================================================


def test_list_formats():
    assert list_formats() == ["markdown", "json", "txt", "csv"]


@pytest.mark.parametrize("fmt", list(ExportFormat))
def test_create_renderer_matches_format(fmt):
    assert create_renderer(fmt).supports_format() is fmt


def test_unknown_format_names_it(export):
    with pytest.raises(UnsupportedFormatError, match="xml"):
        render_export(export, "xml")


def test_default_format_is_the_exports(export):
    assert render_export(export) == render_export(export, ExportFormat.MARKDOWN)


def test_suggested_filename(export):
    assert suggested_filename(export) == "Quotes_code_2024-05-01.md"
    assert suggested_filename(export, "csv") == "Quotes_code_2024-05-01.csv"


# =============================================================================
# JSON
# =============================================================================


def test_json_round_trip(export):
    text = render_export(export, "json")
    assert ConversationExport.model_validate(loads(text)) == export


def test_json_uses_camel_case_and_omits_nulls(export):
    payload = loads(render_export(export, "json"))
    assert payload["exportedAt"] == "2024-05-01T12:00:01.000Z"
    assert payload["metadata"]["messageCount"] == 2
    assert "parentId" not in payload["data"]["messages"][0]["metadata"]


def test_json_round_trip_without_optional_fields():
    bare = make_export()
    bare = bare.model_copy(
        update={
            "data": bare.data.model_copy(
                update={"messages": [m.model_copy(update={"timestamp": None, "metadata": None}) for m in bare.data.messages]}
            )
        }
    )
    assert ConversationExport.model_validate_json(render_export(bare, "json")) == bare


# =============================================================================
# CSV
# =============================================================================


def test_csv_rows(export):
    rows = list(csv.reader(io.StringIO(render_export(export, "csv"))))

    assert rows[0] == ["Index", "Role", "Timestamp", "Content", "MessageId"]
    assert len(rows) == len(export.data.messages) + 1
    assert rows[1] == ["1", "user", "2024-05-01T12:00:00.000Z", 'She said "hi", then left.\nSecond line', "msg-0"]
    assert rows[2][0] == "2"
    assert rows[2][3] == "Here is code:\n\n```python\nprint(1)\n```"


def test_csv_header_is_bare_and_rows_are_quoted(export):
    header, first_row = render_export(export, "csv").split("\n", 2)[:2]

    assert header == "Index,Role,Timestamp,Content,MessageId"
    assert first_row.startswith('1,"user","2024-05-01T12:00:00.000Z",')


def test_csv_doubles_internal_quotes(export):
    assert '"She said ""hi"", then left.' in render_export(export, "csv")


def test_csv_empty_conversation():
    empty = make_export()
    empty = empty.model_copy(update={"data": empty.data.model_copy(update={"messages": []})})
    assert render_export(empty, "csv") == "Index,Role,Timestamp,Content,MessageId\n"


# =============================================================================
# Markdown and text
# =============================================================================


def test_markdown_layout(export):
    text = render_export(export, "markdown")

    assert text.startswith("# Quotes & code\n\n")
    assert "**Exported from:** chatgpt" in text
    assert "**URL:** https://chatgpt.com/c/test-1" in text
    assert "**Messages:** 2" in text
    assert "## 👤 User\n\n*2024-05-01T12:00:00.000Z*\n\nShe said" in text
    assert "## 🤖 Assistant" in text
    assert "```python\nprint(1)\n```" in text
    assert text.index("## 👤 User") < text.index("## 🤖 Assistant") < text.index("## Export Metadata")
    assert "- **Conversation ID:** test-1" in text
    assert "- **Export Version:** 1.0.0" in text


def test_markdown_without_timestamps():
    export = make_export()
    export = export.model_copy(
        update={
            "data": export.data.model_copy(
                update={"messages": [m.model_copy(update={"timestamp": None}) for m in export.data.messages]}
            )
        }
    )
    text = render_export(export, "markdown")
    assert "## 👤 User\n\nHello\n\n---" in text


def test_text_layout(export):
    text = render_export(export, "txt")

    assert text.startswith("Quotes & code\n=============\n\n")
    assert "Exported from: chatgpt\n" in text
    assert "[USER]\n(2024-05-01T12:00:00.000Z)\nShe said" in text
    assert "[ASSISTANT]\n" in text
    assert text.endswith("print(1)\n```\n\n")
