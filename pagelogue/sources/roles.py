"""Role detection strategies for turn nodes.

Each detector answers one question about a node and returns a Role or
None. `detect_role` walks an ordered chain and takes the first answer, so
a new markup variant is supported by appending a detector rather than
editing existing ones.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from bs4 import Tag

from pagelogue.lib.roles import Role, normalize_role
from pagelogue.sources.sites import SiteProfile


class RoleDetector(Protocol):
    def detect(self, node: Tag) -> Role | None: ...


def _attr_text(node: Tag, attr: str) -> str | None:
    value = node.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    return value if isinstance(value, str) else None


class AttributeRoleDetector:
    """Explicit role attribute on the node itself."""

    def __init__(self, attributes: Sequence[str]) -> None:
        self.attributes = tuple(attributes)

    def detect(self, node: Tag) -> Role | None:
        for attr in self.attributes:
            role = normalize_role(_attr_text(node, attr))
            if role is not None:
                return role
        return None


class ClassNameRoleDetector:
    """Heuristic match of class tokens and the tag name against per-site hints."""

    def __init__(self, user_hints: Sequence[str], assistant_hints: Sequence[str]) -> None:
        self.user_hints = tuple(h.lower() for h in user_hints)
        self.assistant_hints = tuple(h.lower() for h in assistant_hints)

    def detect(self, node: Tag) -> Role | None:
        tokens = [str(cls).lower() for cls in node.get("class") or []]
        if node.name:
            tokens.append(node.name.lower())
        for hints, role in ((self.user_hints, Role.USER), (self.assistant_hints, Role.ASSISTANT)):
            if any(hint in token for token in tokens for hint in hints):
                return role
        return None


class NestedRoleDetector:
    """Role attribute on the first descendant that carries one."""

    def __init__(self, attributes: Sequence[str]) -> None:
        self.attributes = tuple(attributes)

    def detect(self, node: Tag) -> Role | None:
        for attr in self.attributes:
            for descendant in node.find_all(attrs={attr: True}):
                role = normalize_role(_attr_text(descendant, attr))
                if role is not None:
                    return role
        return None


def default_detectors(profile: SiteProfile) -> list[RoleDetector]:
    """Detector chain in priority order for a site."""
    return [
        AttributeRoleDetector(profile.role_attributes),
        ClassNameRoleDetector(profile.user_class_hints, profile.assistant_class_hints),
        NestedRoleDetector(profile.role_attributes),
    ]


def detect_role(node: Tag, detectors: Sequence[RoleDetector]) -> Role | None:
    for detector in detectors:
        role = detector.detect(node)
        if role is not None:
            return role
    return None


__all__ = [
    "RoleDetector",
    "AttributeRoleDetector",
    "ClassNameRoleDetector",
    "NestedRoleDetector",
    "default_detectors",
    "detect_role",
]
