"""Export history: an index of past exports plus one payload per export.

Persisted schema (stable contract):
    ``exportHistory``       list of history entries, most recent first
    ``exportData_<id>``     full export payload, for redownload

The two shapes have no shared transaction, so every mutation pairs an
index write with a payload write in a fixed order:

- save: payload first, then index. If the index write fails the payload
  is removed again before the error propagates.
- remove / cleanup: index first, then payloads.

A crash between the two steps can therefore leave at most an orphaned
payload, never an index entry pointing at nothing. Should a dangling
entry still appear (external tampering, older data), reads report it as
DanglingPayloadError instead of silently dropping it.

Read-modify-write of the index is serialized by an asyncio lock held by
the manager; callers in one process must share a manager to benefit.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta

from pagelogue.config import DEFAULT_RETENTION_DAYS
from pagelogue.errors import DanglingPayloadError, ExportNotFoundError
from pagelogue.lib.json import dumps_bytes
from pagelogue.lib.log import get_logger
from pagelogue.lib.models import ConversationExport, ExportHistoryEntry, ExportStatistics
from pagelogue.lib.timestamps import parse_timestamp, utc_now
from pagelogue.storage.store import KeyValueStore
from pagelogue.types import ExportFormat, Site

logger = get_logger(__name__)

HISTORY_KEY = "exportHistory"
EXPORT_DATA_PREFIX = "exportData_"


def payload_key(export_id: str) -> str:
    return f"{EXPORT_DATA_PREFIX}{export_id}"


def calculate_file_size(export: ConversationExport) -> int:
    """Byte length of the payload as persisted under ``exportData_<id>``."""
    return len(dumps_bytes(export.to_payload()))


class ExportHistoryManager:
    """Saves, lists, deduplicates, summarizes and prunes past exports.

    Args:
        store: persistent key/value store holding index and payloads
        clock: returns "now" as an aware datetime; injectable for tests
    """

    def __init__(self, store: KeyValueStore, *, clock: Callable[[], datetime] | None = None) -> None:
        self.store = store
        self._clock = clock or utc_now
        self._index_lock = asyncio.Lock()

    async def _read_index(self) -> list[ExportHistoryEntry]:
        raw = await self.store.get(HISTORY_KEY)
        if not raw:
            return []
        return [ExportHistoryEntry.model_validate(item) for item in raw]

    async def _write_index(self, entries: list[ExportHistoryEntry]) -> None:
        await self.store.set(HISTORY_KEY, [entry.to_payload() for entry in entries])

    async def save_to_history(self, export: ConversationExport) -> ExportHistoryEntry:
        """Persist an export and prepend its entry to the index."""
        entry = ExportHistoryEntry.from_export(export, calculate_file_size(export))
        key = payload_key(export.id)

        async with self._index_lock:
            await self.store.set(key, export.to_payload())
            try:
                history = await self._read_index()
                await self._write_index([entry, *history])
            except BaseException:
                await self.store.remove(key)
                raise

        logger.info("Saved export to history", export_id=export.id, site=export.site.value, bytes=entry.file_size)
        return entry

    async def get_history(self, limit: int | None = None) -> list[ExportHistoryEntry]:
        """History entries, most recent first; `limit` <= 0 or None means all."""
        history = await self._read_index()
        if limit is not None and limit > 0:
            return history[:limit]
        return history

    async def check_duplicate(self, url: str, site: Site, title: str | None = None) -> bool:
        """True if an export of the same url on the same site exists.

        `title` is accepted but not compared; identical titles are common
        across different conversations and retitled ones keep their url.
        """
        history = await self._read_index()
        return any(entry.url == url and entry.site == site for entry in history)

    async def get_statistics(self) -> ExportStatistics:
        history = await self._read_index()
        if not history:
            return ExportStatistics()

        total_exports = len(history)
        total_file_size = sum(entry.file_size for entry in history)
        total_messages = sum(entry.message_count for entry in history)

        sites = Counter(entry.site for entry in history)
        formats = Counter(entry.format for entry in history)

        # Canonical timestamps sort chronologically as strings.
        exported = sorted(entry.exported_at for entry in history)

        return ExportStatistics(
            total_exports=total_exports,
            total_file_size=total_file_size,
            average_file_size=round(total_file_size / total_exports),
            total_messages=total_messages,
            average_messages=round(total_messages / total_exports, 2),
            site_breakdown={site: sites.get(site, 0) for site in Site},
            format_breakdown={fmt: formats.get(fmt, 0) for fmt in ExportFormat},
            oldest_export=exported[0],
            newest_export=exported[-1],
        )

    async def remove_from_history(self, export_id: str) -> bool:
        """Remove an entry and its payload. Returns False if the id was not indexed."""
        async with self._index_lock:
            history = await self._read_index()
            remaining = [entry for entry in history if entry.export_id != export_id]
            removed = len(remaining) != len(history)
            if removed:
                await self._write_index(remaining)
            await self.store.remove(payload_key(export_id))

        if removed:
            logger.info("Removed export from history", export_id=export_id)
        return removed

    async def get_export_for_redownload(self, export_id: str) -> ConversationExport:
        """Load the full export behind a history entry.

        Raises:
            ExportNotFoundError: the id is not in the history index
            DanglingPayloadError: the index lists the id but its payload is gone
        """
        history = await self._read_index()
        if not any(entry.export_id == export_id for entry in history):
            raise ExportNotFoundError(export_id)

        payload = await self.store.get(payload_key(export_id))
        if payload is None:
            raise DanglingPayloadError(export_id)
        return ConversationExport.model_validate(payload)

    async def cleanup_old_history(self, retention_days: int = DEFAULT_RETENTION_DAYS) -> list[str]:
        """Drop entries exported more than `retention_days` ago; returns removed ids.

        Entries whose timestamp cannot be parsed are kept.
        """
        cutoff = self._clock() - timedelta(days=retention_days)

        async with self._index_lock:
            history = await self._read_index()
            retained: list[ExportHistoryEntry] = []
            expired: list[ExportHistoryEntry] = []
            for entry in history:
                exported_at = parse_timestamp(entry.exported_at)
                if exported_at is not None and exported_at < cutoff:
                    expired.append(entry)
                else:
                    retained.append(entry)

            if expired:
                await self._write_index(retained)
                for entry in expired:
                    await self.store.remove(payload_key(entry.export_id))

        if expired:
            logger.info("Cleaned up old exports", removed=len(expired), retention_days=retention_days)
        return [entry.export_id for entry in expired]

    async def verify_integrity(self) -> list[str]:
        """Ids of indexed exports whose payload is missing (dangling payloads)."""
        dangling = []
        for entry in await self._read_index():
            if await self.store.get(payload_key(entry.export_id)) is None:
                dangling.append(entry.export_id)
        if dangling:
            logger.warning("History index has dangling entries", count=len(dangling))
        return dangling


__all__ = [
    "HISTORY_KEY",
    "EXPORT_DATA_PREFIX",
    "ExportHistoryManager",
    "calculate_file_size",
    "payload_key",
]
