"""Persistent key/value stores and the export history built on them."""

from __future__ import annotations

from .history import EXPORT_DATA_PREFIX, HISTORY_KEY, ExportHistoryManager, calculate_file_size
from .sqlite import AsyncSQLiteStore
from .store import KeyValueStore, MemoryStore

__all__ = [
    "AsyncSQLiteStore",
    "EXPORT_DATA_PREFIX",
    "ExportHistoryManager",
    "HISTORY_KEY",
    "KeyValueStore",
    "MemoryStore",
    "calculate_file_size",
]
