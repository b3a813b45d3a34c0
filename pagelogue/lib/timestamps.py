"""Timestamp parsing and canonical formatting.

Canonical form is ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (UTC, millisecond
precision). Strings in that form sort lexicographically in chronological
order, which history statistics rely on.

Handles:
- Unix epoch as int/float (seconds, or milliseconds when large)
- Unix epoch as string
- ISO 8601 strings, with or without offset

All operations use UTC to avoid DST ambiguity issues.
"""

from __future__ import annotations

from datetime import datetime, timezone

# Epoch values above this are taken to be milliseconds (year 5138 in seconds).
_MS_EPOCH_THRESHOLD = 1e11


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _from_epoch(value: float) -> datetime:
    if abs(value) > _MS_EPOCH_THRESHOLD:
        value = value / 1000.0
    return datetime.fromtimestamp(value, tz=timezone.utc)


def parse_timestamp(value: str | int | float | datetime | None) -> datetime | None:
    """Parse a timestamp from various formats to an aware UTC datetime.

    Returns None if the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)

        if isinstance(value, (int, float)):
            return _from_epoch(float(value))

        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            if text.replace(".", "", 1).isdigit():
                return _from_epoch(float(text))
            try:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return None
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
    except (ValueError, OSError, OverflowError):
        # OSError/OverflowError for out-of-range epochs
        return None

    return None


def format_timestamp(ts: datetime) -> str:
    """Format a datetime in canonical form."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def canonical_timestamp(value: str | int | float | datetime | None) -> str | None:
    """Rewrite any parseable timestamp into canonical form; None if unparseable."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return format_timestamp(parsed)


def now_timestamp() -> str:
    return format_timestamp(utc_now())


__all__ = ["utc_now", "parse_timestamp", "format_timestamp", "canonical_timestamp", "now_timestamp"]
