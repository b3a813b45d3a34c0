"""pagelogue - export AI chat conversations from rendered chat pages.

Extracts the conversation on a ChatGPT, Claude or Gemini page, validates
and normalizes it, renders it as markdown, json, txt or csv, and keeps a
deduplicated history of past exports.

Example:
    from pagelogue import ConversationExporter, ExportOptions, HtmlPageAccessor, Site, render_export

    accessor = HtmlPageAccessor.from_path(Path("chat.html"))
    exporter = ConversationExporter(accessor, Site.CHATGPT)
    export = await exporter.export_conversation(ExportOptions(format="markdown"))
    print(render_export(export))
"""

from pagelogue.errors import PagelogueError
from pagelogue.export import ConversationExporter, ExportOptions
from pagelogue.lib.models import ConversationData, ConversationExport, ConversationMessage
from pagelogue.rendering import render_export
from pagelogue.sources import ConversationExtractor, DocumentAccessor, HtmlPageAccessor
from pagelogue.storage import AsyncSQLiteStore, ExportHistoryManager, MemoryStore
from pagelogue.types import ExportFormat, Site
from pagelogue.version import __version__

__all__ = [
    "__version__",
    "AsyncSQLiteStore",
    "ConversationData",
    "ConversationExport",
    "ConversationExporter",
    "ConversationExtractor",
    "ConversationMessage",
    "DocumentAccessor",
    "ExportFormat",
    "ExportHistoryManager",
    "ExportOptions",
    "HtmlPageAccessor",
    "MemoryStore",
    "PagelogueError",
    "Site",
    "render_export",
]
