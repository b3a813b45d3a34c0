"""Conversation extraction from a rendered chat page.

`ConversationExtractor` walks the nodes a `DocumentAccessor` exposes for
one page and builds a `ConversationData`. It is pure relative to the
accessor's state: the only side effects are the awaited accessor calls.

Failure policy:
    - Any exception raised by the accessor aborts the extraction with
      ExtractionError. No partial result is returned.
    - Anything that goes wrong with a single turn (no role, empty or
      oversized content) drops that turn and extraction carries on.
    - An empty conversation is not an error.

Heuristic fallbacks (default title, missing timestamps) are reported as
findings alongside the data so the exporter can surface them.
"""

from __future__ import annotations

from collections.abc import Awaitable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar
from urllib.parse import urlsplit, urlunsplit

from bs4 import Tag

from pagelogue.errors import ExtractionError
from pagelogue.lib.log import get_logger
from pagelogue.lib.models import (
    MAX_RAW_SNIPPET_LENGTH,
    ConversationData,
    ConversationMessage,
    ConversationMetadata,
    MessageMetadata,
)
from pagelogue.lib.text import normalize_content, normalize_title
from pagelogue.lib.timestamps import canonical_timestamp, now_timestamp
from pagelogue.sources.accessor import DocumentAccessor
from pagelogue.sources.content import extract_rich_text
from pagelogue.sources.roles import RoleDetector, default_detectors, detect_role
from pagelogue.sources.sites import SiteProfile, get_profile
from pagelogue.types import Site

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 100_000
DEFAULT_LANGUAGE = "en"

T = TypeVar("T")


@dataclass
class ExtractionResult:
    data: ConversationData
    findings: list[str] = field(default_factory=list)


def canonical_url(url: str) -> str:
    """Lower-case scheme and host and drop the fragment."""
    if not url:
        return ""
    parts = urlsplit(url.strip())
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, ""))


def _first_attr(node: Tag, attributes: Sequence[str]) -> str | None:
    for attr in attributes:
        value = node.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class ConversationExtractor:
    """Extracts one conversation from the page behind an accessor.

    Args:
        accessor: page access capability; never constructed here
        site: the site the caller says the page belongs to (not re-detected)
        profile: override the site's default `SiteProfile`
        detectors: override the role detector chain
    """

    def __init__(
        self,
        accessor: DocumentAccessor,
        site: Site,
        *,
        profile: SiteProfile | None = None,
        detectors: Sequence[RoleDetector] | None = None,
    ) -> None:
        self.accessor = accessor
        self.site = site
        self.profile = profile or get_profile(site)
        self.detectors = list(detectors) if detectors is not None else default_detectors(self.profile)

    async def extract_conversation_data(self) -> ConversationData:
        result = await self.extract_with_findings()
        return result.data

    async def extract_with_findings(self) -> ExtractionResult:
        findings: list[str] = []
        extracted_at = now_timestamp()

        title = await self._extract_title()
        if not title:
            title = self.profile.default_title
            findings.append(f"Conversation title not found; using default '{title}'")

        nodes = await self._find_turn_nodes()
        messages: list[ConversationMessage] = []
        missing_timestamps = 0
        for index, node in enumerate(nodes):
            try:
                message = self._parse_turn(node, index)
            except (ValueError, TypeError, AttributeError, RecursionError) as exc:
                logger.debug("Dropped unparseable message", index=index, error=str(exc))
                continue
            if message is None:
                continue
            if message.timestamp is None:
                missing_timestamps += 1
                message = message.model_copy(update={"timestamp": extracted_at})
            messages.append(message)
        if missing_timestamps:
            findings.append(f"{missing_timestamps} message(s) had no timestamp; used extraction time")

        # Order is an invariant, not an assumption about node order.
        messages.sort(key=lambda m: m.metadata.index if m.metadata else 0)

        url = canonical_url(await self._call(self.accessor.page_url()))
        language = await self._call(self.accessor.page_language()) or DEFAULT_LANGUAGE
        in_progress = await self._has_in_progress_marker()

        metadata = ConversationMetadata(
            site=self.site,
            url=url,
            conversation_id=self.profile.conversation_id_from_path(urlsplit(url).path),
            total_messages=len(messages),
            extracted_at=extracted_at,
            language=language,
            is_completed=not in_progress,
        )
        logger.info(
            "Extracted conversation",
            site=self.site.value,
            turns=len(nodes),
            messages=len(messages),
            completed=not in_progress,
        )
        return ExtractionResult(
            data=ConversationData(title=title, messages=messages, metadata=metadata),
            findings=findings,
        )

    async def _call(self, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"Conversation extraction failed: {exc}") from exc

    async def _extract_title(self) -> str:
        for selector in self.profile.title_selectors:
            node = await self._call(self.accessor.query_one(selector))
            if node is not None:
                title = normalize_title(node.get_text())
                if title:
                    return title
        return ""

    async def _find_turn_nodes(self) -> list[Tag]:
        for selector in self.profile.turn_selectors:
            nodes = await self._call(self.accessor.query_all(selector))
            if nodes:
                # Same node reachable twice only through overlapping selector groups.
                unique: list[Tag] = []
                seen: set[int] = set()
                for node in nodes:
                    if id(node) not in seen:
                        seen.add(id(node))
                        unique.append(node)
                return unique
        return []

    async def _has_in_progress_marker(self) -> bool:
        for selector in self.profile.in_progress_selectors:
            if await self._call(self.accessor.query_one(selector)) is not None:
                return True
        return False

    def _parse_turn(self, node: Tag, index: int) -> ConversationMessage | None:
        role = detect_role(node, self.detectors)
        if role is None:
            return None

        content = normalize_content(extract_rich_text(self._content_node(node)))
        if not content:
            logger.debug("Dropped empty message", index=index)
            return None
        if len(content) > MAX_MESSAGE_LENGTH:
            logger.debug("Dropped oversized message", index=index, length=len(content))
            return None

        return ConversationMessage(
            role=role,
            content=content,
            timestamp=self._timestamp(node),
            metadata=self._message_metadata(node, index),
        )

    def _content_node(self, node: Tag) -> Tag:
        for selector in self.profile.content_selectors:
            found = node.select_one(selector)
            if found is not None:
                return found
        return node

    def _role_node(self, node: Tag) -> Tag | None:
        """The node itself or first descendant carrying a role attribute."""
        for attr in self.profile.role_attributes:
            if node.has_attr(attr):
                return node
            found = node.find(attrs={attr: True})
            if isinstance(found, Tag):
                return found
        return None

    def _message_metadata(self, node: Tag, index: int) -> MessageMetadata:
        candidates = [node]
        role_node = self._role_node(node)
        if role_node is not None and role_node is not node:
            candidates.append(role_node)

        def lookup(attributes: Sequence[str]) -> str | None:
            for candidate in candidates:
                value = _first_attr(candidate, attributes)
                if value:
                    return value
            return None

        return MessageMetadata(
            message_id=lookup(self.profile.message_id_attributes),
            parent_id=lookup(self.profile.parent_id_attributes),
            index=index,
            raw_snippet=str(node)[:MAX_RAW_SNIPPET_LENGTH],
            model=lookup(self.profile.model_attributes),
        )

    def _timestamp_node(self, node: Tag) -> Tag | None:
        for selector in self.profile.timestamp_selectors:
            found = node.select_one(selector)
            if found is not None:
                return found
        return None

    def _timestamp(self, node: Tag) -> str | None:
        found = self._timestamp_node(node)
        if found is None:
            return None
        for raw in (found.get("datetime"), found.get("data-timestamp"), found.get_text()):
            if isinstance(raw, str):
                canonical = canonical_timestamp(raw)
                if canonical is not None:
                    return canonical
        return None


__all__ = ["MAX_MESSAGE_LENGTH", "ConversationExtractor", "ExtractionResult", "canonical_url"]
