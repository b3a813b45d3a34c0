"""Markdown renderer implementation."""

from __future__ import annotations

from pagelogue.lib.models import ConversationExport
from pagelogue.lib.roles import Role
from pagelogue.types import ExportFormat

ROLE_ICONS = {Role.USER: "👤", Role.ASSISTANT: "🤖"}


class MarkdownRenderer:
    """Renders exports as a Markdown document.

    Layout: title header, bold metadata lines, one ``## {icon} {Role}``
    section per message separated by rules, and an ``## Export Metadata``
    footer.
    """

    def supports_format(self) -> ExportFormat:
        return ExportFormat.MARKDOWN

    def render(self, export: ConversationExport) -> str:
        data = export.data
        lines = [
            f"# {data.title}",
            "",
            f"**Exported from:** {export.site.value}",
            f"**URL:** {export.url}",
            f"**Date:** {export.exported_at}",
            f"**Messages:** {export.metadata.message_count}",
            "",
            "---",
            "",
        ]

        for index, message in enumerate(data.messages):
            lines.append(f"## {ROLE_ICONS[message.role]} {message.role.label}")
            lines.append("")
            if message.timestamp:
                lines.append(f"*{message.timestamp}*")
                lines.append("")
            lines.append(message.content)
            lines.append("")
            if index < len(data.messages) - 1:
                lines.append("---")
                lines.append("")

        meta = data.metadata
        lines.extend(
            [
                "---",
                "",
                "## Export Metadata",
                "",
                f"- **Total Messages:** {meta.total_messages}",
                f"- **Extracted At:** {meta.extracted_at}",
                f"- **Conversation ID:** {meta.conversation_id or 'Unknown'}",
                f"- **Export Version:** {export.metadata.export_version}",
            ]
        )
        return "\n".join(lines) + "\n"


__all__ = ["MarkdownRenderer"]
