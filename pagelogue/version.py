from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as metadata_version


def _resolve_version() -> str:
    try:
        return metadata_version("pagelogue")
    except PackageNotFoundError:
        return "0.0.0+local"


__version__ = _resolve_version()

__all__ = ["__version__"]
