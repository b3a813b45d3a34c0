"""Persistent key/value store protocol and the in-memory implementation.

Values are JSON-compatible objects. Stores keep them as orjson bytes so
that `bytes_in_use` and quota checks measure what is actually written.
A write that would push usage past the quota raises StorageQuotaError
and leaves the store unchanged.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pagelogue.config import DEFAULT_STORAGE_QUOTA
from pagelogue.errors import StorageQuotaError
from pagelogue.lib.json import dumps_bytes, loads


@runtime_checkable
class KeyValueStore(Protocol):
    """Namespaced, quota-bounded key/value store."""

    quota_bytes: int

    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None if the key is absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one.

        Raises:
            StorageQuotaError: If the write would exceed the quota
        """
        ...

    async def remove(self, key: str) -> None:
        """Delete a key; no-op if absent."""
        ...

    async def bytes_in_use(self) -> int:
        """Total bytes currently stored (keys plus serialized values)."""
        ...


def encode_value(value: Any) -> bytes:
    return dumps_bytes(value)


def decode_value(raw: bytes | str) -> Any:
    return loads(raw)


def check_quota(*, quota: int, in_use: int, replaced: int, incoming: int) -> None:
    """Raise StorageQuotaError if replacing `replaced` bytes with `incoming` overflows."""
    projected = in_use - replaced + incoming
    if projected > quota:
        raise StorageQuotaError(required=incoming, available=max(quota - (in_use - replaced), 0))


class MemoryStore:
    """Dict-backed store. Useful for tests and one-shot CLI runs."""

    def __init__(self, quota_bytes: int = DEFAULT_STORAGE_QUOTA) -> None:
        self.quota_bytes = quota_bytes
        self._data: dict[str, bytes] = {}

    def _entry_size(self, key: str) -> int:
        raw = self._data.get(key)
        return 0 if raw is None else len(key.encode("utf-8")) + len(raw)

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else decode_value(raw)

    async def set(self, key: str, value: Any) -> None:
        raw = encode_value(value)
        check_quota(
            quota=self.quota_bytes,
            in_use=await self.bytes_in_use(),
            replaced=self._entry_size(key),
            incoming=len(key.encode("utf-8")) + len(raw),
        )
        self._data[key] = raw

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def bytes_in_use(self) -> int:
        return sum(self._entry_size(key) for key in self._data)


__all__ = ["KeyValueStore", "MemoryStore", "check_quota", "encode_value", "decode_value"]
