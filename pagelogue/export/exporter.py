"""Export assembly: extract, validate, normalize, record.

`ConversationExporter.export_conversation` turns the page behind an
accessor into an immutable `ConversationExport`. Rendering to text is a
separate, on-demand step (`pagelogue.rendering.render_export`).
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass

from pagelogue.config import Settings, get_settings
from pagelogue.errors import ConfigError, ValidationError
from pagelogue.lib.log import get_logger
from pagelogue.lib.models import ConversationExport, ExportMetadata
from pagelogue.lib.timestamps import now_timestamp
from pagelogue.sources.accessor import DocumentAccessor
from pagelogue.sources.extractor import ConversationExtractor
from pagelogue.storage.history import ExportHistoryManager
from pagelogue.types import ExportFormat, Site

from .normalizer import normalize_conversation
from .validation import ValidationResult, validate_conversation

logger = get_logger(__name__)

DUPLICATE_WARNING = "Conversation was already exported from this URL"


@dataclass
class ExportOptions:
    format: ExportFormat | str = ExportFormat.MARKDOWN
    include_metadata: bool = True
    include_timestamps: bool = True
    include_raw_snippet: bool = True
    validate_data: bool = True
    save_to_storage: bool = False
    force_duplicate: bool = False
    url: str | None = None


def generate_export_id() -> str:
    return f"export_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class ConversationExporter:
    """Builds exports for one page.

    Args:
        accessor: page access capability handed to the extractor
        site: provider the page belongs to
        history: history manager for duplicate checks and saving; optional
        settings: runtime settings; defaults to the environment's
    """

    def __init__(
        self,
        accessor: DocumentAccessor,
        site: Site,
        *,
        history: ExportHistoryManager | None = None,
        settings: Settings | None = None,
        extractor: ConversationExtractor | None = None,
    ) -> None:
        self.site = site
        self.history = history
        self.settings = settings or get_settings()
        self.extractor = extractor or ConversationExtractor(accessor, site)

    async def export_conversation(self, options: ExportOptions | None = None) -> ConversationExport:
        options = options or ExportOptions(format=self.settings.default_format)
        fmt = ExportFormat.parse(options.format)
        if options.save_to_storage and self.history is None:
            raise ConfigError("save_to_storage requested but no export history is configured")

        started = time.perf_counter()
        extraction = await self.extractor.extract_with_findings()
        extraction_time = int((time.perf_counter() - started) * 1000)
        data = extraction.data

        if options.validate_data:
            validation = validate_conversation(data)
            if not validation.is_valid:
                raise ValidationError(validation.errors)
        else:
            validation = ValidationResult(message_count=len(data.messages))

        normalized = normalize_conversation(
            data,
            include_timestamps=options.include_timestamps,
            include_metadata=options.include_metadata,
            include_raw_snippet=options.include_raw_snippet,
        )

        url = options.url or normalized.metadata.url
        parsing_errors = [*extraction.findings, *validation.warnings]

        if self.history is not None and await self.history.check_duplicate(url, self.site, normalized.title):
            if options.force_duplicate:
                logger.info("Re-exporting duplicate conversation", url=url, site=self.site.value)
            else:
                parsing_errors.append(DUPLICATE_WARNING)
                logger.warning("Duplicate export", url=url, site=self.site.value)

        export = ConversationExport(
            id=generate_export_id(),
            site=self.site,
            title=normalized.title,
            url=url,
            exported_at=now_timestamp(),
            format=fmt,
            data=normalized,
            metadata=ExportMetadata(
                message_count=len(normalized.messages),
                user_agent=self.settings.user_agent,
                extraction_time=extraction_time,
                parsing_errors=parsing_errors,
                data_integrity=validation.data_integrity,
            ),
        )
        logger.info(
            "Exported conversation",
            export_id=export.id,
            format=fmt.value,
            messages=export.metadata.message_count,
            warnings=len(parsing_errors),
        )

        if options.save_to_storage and self.history is not None:
            await self.history.save_to_history(export)
        return export


__all__ = ["DUPLICATE_WARNING", "ExportOptions", "ConversationExporter", "generate_export_id"]
