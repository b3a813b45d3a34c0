"""CLI package public API shim."""

from .app import cli, main

__all__ = ["cli", "main"]
