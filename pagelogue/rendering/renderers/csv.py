"""CSV renderer implementation.

A bare header row plus one row per message. Every non-numeric data field
is quoted and embedded quotes are doubled, so multi-line content survives a
round trip through any RFC 4180 reader.
"""

from __future__ import annotations

import csv
import io

from pagelogue.lib.models import ConversationExport
from pagelogue.types import ExportFormat

HEADER = ("Index", "Role", "Timestamp", "Content", "MessageId")


class CSVRenderer:
    def supports_format(self) -> ExportFormat:
        return ExportFormat.CSV

    def render(self, export: ConversationExport) -> str:
        buffer = io.StringIO()
        buffer.write(",".join(HEADER) + "\n")
        writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
        for index, message in enumerate(export.data.messages, start=1):
            message_id = message.metadata.message_id if message.metadata else None
            writer.writerow(
                (
                    index,
                    message.role.value,
                    message.timestamp or "",
                    message.content,
                    message_id or "",
                )
            )
        return buffer.getvalue()


__all__ = ["CSVRenderer", "HEADER"]
