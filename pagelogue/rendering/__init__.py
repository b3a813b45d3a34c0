"""Rendering package for export output."""

from __future__ import annotations

from pagelogue.lib.models import ConversationExport
from pagelogue.types import ExportFormat

from .core import ExportRenderer, suggested_filename
from .renderers import CSVRenderer, JSONRenderer, MarkdownRenderer, TextRenderer, create_renderer, list_formats


def render_export(export: ConversationExport, fmt: ExportFormat | str | None = None) -> str:
    """Render an export in `fmt`, defaulting to the format it was exported as."""
    return create_renderer(fmt if fmt is not None else export.format).render(export)


__all__ = [
    "CSVRenderer",
    "ExportRenderer",
    "JSONRenderer",
    "MarkdownRenderer",
    "TextRenderer",
    "create_renderer",
    "list_formats",
    "render_export",
    "suggested_filename",
]
