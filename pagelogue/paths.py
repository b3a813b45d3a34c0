"""Shared filesystem paths and helpers for pagelogue."""

from __future__ import annotations

import os
import re
from pathlib import Path


def _xdg_path(env_var: str, fallback: Path) -> Path:
    raw = os.environ.get(env_var)
    if raw:
        return Path(raw).expanduser()
    return fallback


CONFIG_ROOT = _xdg_path("XDG_CONFIG_HOME", Path.home() / ".config")
DATA_ROOT = _xdg_path("XDG_DATA_HOME", Path.home() / ".local/share")

CONFIG_HOME = CONFIG_ROOT / "pagelogue"
DATA_HOME = DATA_ROOT / "pagelogue"

_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9.-]+")


def safe_filename(raw: str, *, fallback: str = "conversation", max_length: int = 80) -> str:
    """Return a filesystem-safe file stem derived from a conversation title."""
    value = _UNSAFE_FILENAME_RE.sub("_", str(raw or "")).strip("._-")
    value = value[:max_length].rstrip("._-")
    return value or fallback


__all__ = ["CONFIG_HOME", "DATA_HOME", "CONFIG_ROOT", "DATA_ROOT", "safe_filename"]
