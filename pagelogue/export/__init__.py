"""Validation, normalization and assembly of conversation exports."""

from __future__ import annotations

from .exporter import DUPLICATE_WARNING, ConversationExporter, ExportOptions, generate_export_id
from .normalizer import normalize_conversation, normalize_message
from .validation import ValidationResult, validate_conversation

__all__ = [
    "DUPLICATE_WARNING",
    "ConversationExporter",
    "ExportOptions",
    "ValidationResult",
    "generate_export_id",
    "normalize_conversation",
    "normalize_message",
    "validate_conversation",
]
