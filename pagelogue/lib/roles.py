"""Role normalization for chat turns.

Maps the role strings found in provider markup onto the two canonical
conversation roles.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Canonical conversation roles."""

    USER = "user"
    ASSISTANT = "assistant"

    @property
    def label(self) -> str:
        return "User" if self is Role.USER else "Assistant"


ROLE_MAP = {
    "user": Role.USER,
    "human": Role.USER,
    "you": Role.USER,
    "assistant": Role.ASSISTANT,
    "model": Role.ASSISTANT,
    "ai": Role.ASSISTANT,
    "bot": Role.ASSISTANT,
}


def normalize_role(raw: str | None) -> Role | None:
    """Normalize a provider role string.

    Returns None for empty or unrecognized values (system/tool turns are
    not part of an exported conversation).
    """
    if not raw:
        return None
    return ROLE_MAP.get(raw.strip().lower())


__all__ = ["Role", "ROLE_MAP", "normalize_role"]
