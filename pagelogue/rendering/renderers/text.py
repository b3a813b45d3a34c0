"""Plain text renderer implementation."""

from __future__ import annotations

from pagelogue.lib.models import ConversationExport
from pagelogue.types import ExportFormat


class TextRenderer:
    """Header block, an ``=`` rule, then ``[ROLE]`` blocks per message."""

    def supports_format(self) -> ExportFormat:
        return ExportFormat.TXT

    def render(self, export: ConversationExport) -> str:
        data = export.data
        parts = [
            f"{data.title}\n",
            f"{'=' * max(len(data.title), 1)}\n\n",
            f"Exported from: {export.site.value}\n",
            f"URL: {export.url}\n",
            f"Date: {export.exported_at}\n\n",
        ]
        for message in data.messages:
            parts.append(f"[{message.role.value.upper()}]\n")
            if message.timestamp:
                parts.append(f"({message.timestamp})\n")
            parts.append(f"{message.content}\n\n")
        return "".join(parts)


__all__ = ["TextRenderer"]
