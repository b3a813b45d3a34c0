"""Helpers shared by the format renderers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pagelogue.lib.models import ConversationExport
from pagelogue.paths import safe_filename
from pagelogue.types import ExportFormat


@runtime_checkable
class ExportRenderer(Protocol):
    """Renders a finished export into one text encoding.

    Renderers are pure: same export in, same text out.
    """

    def render(self, export: ConversationExport) -> str:
        """Render the export to a complete, self-contained document."""
        ...

    def supports_format(self) -> ExportFormat:
        """Return the format this renderer produces."""
        ...


def suggested_filename(export: ConversationExport, fmt: ExportFormat | str | None = None) -> str:
    """Filesystem-safe download name, e.g. ``My_Chat_2024-05-01.md``."""
    resolved = ExportFormat.parse(fmt) if fmt is not None else export.format
    stem = safe_filename(export.title)
    return f"{stem}_{export.exported_at[:10]}.{resolved.extension}"


__all__ = ["ExportRenderer", "suggested_filename"]
