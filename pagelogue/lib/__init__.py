"""Shared building blocks: models, roles, timestamps, text normalization, logging."""
