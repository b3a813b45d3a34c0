"""JSON renderer implementation.

The document is the export's camelCase payload (unset optionals omitted),
so `ConversationExport.model_validate_json` on the output reproduces the
export exactly.
"""

from __future__ import annotations

from pagelogue.lib.json import dumps
from pagelogue.lib.models import ConversationExport
from pagelogue.types import ExportFormat


class JSONRenderer:
    def supports_format(self) -> ExportFormat:
        return ExportFormat.JSON

    def render(self, export: ConversationExport) -> str:
        return dumps(export.to_payload(), indent=True) + "\n"


__all__ = ["JSONRenderer"]
