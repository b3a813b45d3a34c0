"""Renderer factory and implementations."""

from __future__ import annotations

from pagelogue.rendering.core import ExportRenderer
from pagelogue.types import ExportFormat

from .csv import CSVRenderer
from .json import JSONRenderer
from .markdown import MarkdownRenderer
from .text import TextRenderer

_RENDERERS: dict[ExportFormat, type[ExportRenderer]] = {
    ExportFormat.MARKDOWN: MarkdownRenderer,
    ExportFormat.JSON: JSONRenderer,
    ExportFormat.TXT: TextRenderer,
    ExportFormat.CSV: CSVRenderer,
}


def create_renderer(format: ExportFormat | str) -> ExportRenderer:
    """Create a renderer for the specified format.

    Args:
        format: Output format name or enum member ('markdown', 'json', 'txt', 'csv')

    Returns:
        ExportRenderer implementation for the requested format

    Raises:
        UnsupportedFormatError: If format is not supported
    """
    return _RENDERERS[ExportFormat.parse(format)]()


def list_formats() -> list[str]:
    """List all supported output formats."""
    return [fmt.value for fmt in _RENDERERS]


__all__ = [
    "CSVRenderer",
    "JSONRenderer",
    "MarkdownRenderer",
    "TextRenderer",
    "create_renderer",
    "list_formats",
]
