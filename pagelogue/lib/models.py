"""Domain models for extracted conversations, exports and export history.

The key types are:

- `ConversationMessage`: one user or assistant turn with optional
  extraction metadata (`MessageMetadata`)

- `ConversationData`: the title, ordered messages and page metadata
  produced by a single extraction

- `ConversationExport`: an immutable export record wrapping a normalized
  `ConversationData` with export metadata

- `ExportHistoryEntry` / `ExportStatistics`: the persisted history
  projection and the aggregate computed over it

Attributes are snake_case in Python. Serialized forms (the JSON rendering
and the payloads written to the persistent store) use camelCase aliases,
so the persisted schema reads ``exportedAt``, ``messageCount`` and so on.
Both spellings are accepted on input.

Example:
    export = ConversationExport.model_validate(payload)
    for message in export.data.messages:
        print(message.role.label, message.content[:50])
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pagelogue.lib.roles import Role
from pagelogue.lib.timestamps import canonical_timestamp
from pagelogue.types import ExportFormat, Site

EXPORT_VERSION = "1.0.0"
MAX_RAW_SNIPPET_LENGTH = 500


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible camelCase dict, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _canonical_or_raise(value: Any) -> Any:
    if value is None:
        return None
    canonical = canonical_timestamp(value)
    if canonical is None:
        raise ValueError(f"Unparseable timestamp: {value!r}")
    return canonical


class MessageMetadata(_Model):
    message_id: str | None = None
    parent_id: str | None = None
    index: int
    raw_snippet: str | None = None
    model: str | None = None

    @field_validator("raw_snippet")
    @classmethod
    def cap_snippet(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v[:MAX_RAW_SNIPPET_LENGTH]


class ConversationMessage(_Model):
    role: Role
    content: str
    timestamp: str | None = None
    metadata: MessageMetadata | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def canonicalize_timestamp(cls, v: Any) -> Any:
        return _canonical_or_raise(v)


class ConversationMetadata(_Model):
    site: Site
    url: str
    conversation_id: str | None = None
    total_messages: int = 0
    extracted_at: str
    language: str | None = None
    is_completed: bool = True

    @field_validator("extracted_at", mode="before")
    @classmethod
    def canonicalize_extracted_at(cls, v: Any) -> Any:
        return _canonical_or_raise(v)


class ConversationData(_Model):
    title: str
    messages: list[ConversationMessage] = Field(default_factory=list)
    metadata: ConversationMetadata


class ExportMetadata(_Model):
    message_count: int
    export_version: str = EXPORT_VERSION
    user_agent: str
    extraction_time: int = Field(ge=0, description="Milliseconds spent in extraction")
    parsing_errors: list[str] = Field(default_factory=list)
    data_integrity: bool = True


class ConversationExport(_Model):
    id: str
    site: Site
    title: str
    url: str
    exported_at: str
    format: ExportFormat
    data: ConversationData
    metadata: ExportMetadata

    @field_validator("exported_at", mode="before")
    @classmethod
    def canonicalize_exported_at(cls, v: Any) -> Any:
        return _canonical_or_raise(v)


class ExportHistoryEntry(_Model):
    export_id: str
    title: str
    site: Site
    format: ExportFormat
    exported_at: str
    url: str
    file_size: int = Field(ge=0)
    message_count: int = Field(ge=0)

    @classmethod
    def from_export(cls, export: ConversationExport, file_size: int) -> ExportHistoryEntry:
        return cls(
            export_id=export.id,
            title=export.title,
            site=export.site,
            format=export.format,
            exported_at=export.exported_at,
            url=export.url,
            file_size=file_size,
            message_count=export.metadata.message_count,
        )


class ExportStatistics(_Model):
    """Aggregate view over the export history; computed on demand, never stored."""

    total_exports: int = 0
    total_file_size: int = 0
    average_file_size: int = 0
    total_messages: int = 0
    average_messages: float = 0.0
    site_breakdown: dict[Site, int] = Field(default_factory=lambda: {site: 0 for site in Site})
    format_breakdown: dict[ExportFormat, int] = Field(default_factory=lambda: {fmt: 0 for fmt in ExportFormat})
    oldest_export: str | None = None
    newest_export: str | None = None


__all__ = [
    "EXPORT_VERSION",
    "MAX_RAW_SNIPPET_LENGTH",
    "MessageMetadata",
    "ConversationMessage",
    "ConversationMetadata",
    "ConversationData",
    "ExportMetadata",
    "ConversationExport",
    "ExportHistoryEntry",
    "ExportStatistics",
]
