"""Async SQLite key/value store using aiosqlite.

One ``kv`` table holds every key. Writes are serialized with an
asyncio lock and the quota check runs inside the same transaction as the
write, so a rejected write leaves the table untouched.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite

from pagelogue.config import DEFAULT_STORAGE_QUOTA
from pagelogue.errors import StorageError
from pagelogue.lib.log import get_logger
from pagelogue.storage.store import check_quota, decode_value, encode_value

LOGGER = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL
)
"""

_SIZE_EXPR = "length(CAST(key AS BLOB)) + length(value)"


class AsyncSQLiteStore:
    """Key/value store persisted in a SQLite file.

    Example:
        store = AsyncSQLiteStore(Path("~/.local/share/pagelogue/pagelogue.db"))
        await store.set("exportHistory", [])
        history = await store.get("exportHistory")
    """

    def __init__(self, db_path: Path, *, quota_bytes: int = DEFAULT_STORAGE_QUOTA) -> None:
        self._db_path = Path(db_path)
        self.quota_bytes = quota_bytes

        self._write_lock = asyncio.Lock()
        self._schema_lock = asyncio.Lock()
        self._schema_ensured = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def _ensure_schema_once(self) -> None:
        if self._schema_ensured:
            return
        async with self._schema_lock:
            if self._schema_ensured:
                return
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(self._db_path, timeout=30) as conn:
                await conn.execute("PRAGMA journal_mode=WAL")
                await conn.execute(_SCHEMA)
                await conn.commit()
            self._schema_ensured = True

    @asynccontextmanager
    async def _get_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        await self._ensure_schema_once()
        try:
            async with aiosqlite.connect(self._db_path, timeout=30, isolation_level=None) as conn:
                await conn.execute("PRAGMA busy_timeout = 30000")
                yield conn
        except aiosqlite.Error as exc:
            raise StorageError(f"SQLite store failure ({self._db_path}): {exc}") from exc

    async def get(self, key: str) -> Any | None:
        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = await cursor.fetchone()
        if row is None:
            return None
        return decode_value(row[0])

    async def set(self, key: str, value: Any) -> None:
        raw = encode_value(value)
        incoming = len(key.encode("utf-8")) + len(raw)
        async with self._write_lock, self._get_connection() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                cursor = await conn.execute(f"SELECT COALESCE(SUM({_SIZE_EXPR}), 0) FROM kv")
                in_use = (await cursor.fetchone())[0]
                cursor = await conn.execute(f"SELECT {_SIZE_EXPR} FROM kv WHERE key = ?", (key,))
                existing = await cursor.fetchone()
                check_quota(
                    quota=self.quota_bytes,
                    in_use=in_use,
                    replaced=existing[0] if existing else 0,
                    incoming=incoming,
                )
                await conn.execute(
                    "INSERT INTO kv (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, raw),
                )
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            await conn.execute("COMMIT")
        LOGGER.debug("Stored key", key=key, bytes=incoming)

    async def remove(self, key: str) -> None:
        async with self._write_lock, self._get_connection() as conn:
            await conn.execute("DELETE FROM kv WHERE key = ?", (key,))

    async def bytes_in_use(self) -> int:
        async with self._get_connection() as conn:
            cursor = await conn.execute(f"SELECT COALESCE(SUM({_SIZE_EXPR}), 0) FROM kv")
            row = await cursor.fetchone()
        return int(row[0])


__all__ = ["AsyncSQLiteStore"]
