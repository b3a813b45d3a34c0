"""pagelogue error hierarchy.

All project exceptions inherit from PagelogueError, enabling:
- ``except PagelogueError`` at top-level boundaries (CLI)
- Fine-grained catches deeper in the stack (``except DanglingPayloadError``)

Hierarchy:
    PagelogueError
    ├── ConfigError
    ├── ExtractionError
    ├── ValidationError
    ├── UnsupportedFormatError
    └── StorageError
        ├── StorageQuotaError
        └── NotFoundError
            ├── ExportNotFoundError
            └── DanglingPayloadError
"""

from __future__ import annotations


class PagelogueError(Exception):
    """Base class for all pagelogue errors."""


class ConfigError(PagelogueError):
    """Invalid configuration value."""


class ExtractionError(PagelogueError):
    """The document accessor failed; no partial result is produced."""


class ValidationError(PagelogueError):
    """A fatal validation rule was violated while validation was requested."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Data validation failed: {', '.join(self.errors)}")


class UnsupportedFormatError(PagelogueError):
    def __init__(self, fmt: object) -> None:
        self.format = str(fmt)
        super().__init__(f"Unsupported export format: {self.format}")


class StorageError(PagelogueError):
    """Base class for persistent store errors."""


class StorageQuotaError(StorageError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Storage quota exceeded. Required: {required} bytes, Available: {available} bytes")


class NotFoundError(StorageError):
    """Base class for lookups that found nothing."""


class ExportNotFoundError(NotFoundError):
    def __init__(self, export_id: str) -> None:
        self.export_id = export_id
        super().__init__(f"Export not found in history: {export_id}")


class DanglingPayloadError(NotFoundError):
    """The history index lists an export whose payload is missing from the store."""

    def __init__(self, export_id: str) -> None:
        self.export_id = export_id
        super().__init__(f"Export data missing for indexed export: {export_id}")


__all__ = [
    "PagelogueError",
    "ConfigError",
    "ExtractionError",
    "ValidationError",
    "UnsupportedFormatError",
    "StorageError",
    "StorageQuotaError",
    "NotFoundError",
    "ExportNotFoundError",
    "DanglingPayloadError",
]
