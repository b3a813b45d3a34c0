"""Central JSON utilities using orjson."""

from __future__ import annotations

from typing import Any

import orjson


def dumps_bytes(obj: Any, *, indent: bool = False) -> bytes:
    """Dump object to UTF-8 JSON bytes."""
    option = orjson.OPT_INDENT_2 if indent else None
    return orjson.dumps(obj, option=option)


def dumps(obj: Any, *, indent: bool = False) -> str:
    """Dump object to JSON string."""
    return dumps_bytes(obj, indent=indent).decode("utf-8")


def loads(obj: str | bytes) -> Any:
    """Load object from JSON string or bytes."""
    return orjson.loads(obj)


__all__ = ["dumps", "dumps_bytes", "loads"]
