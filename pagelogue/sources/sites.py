"""Per-site extraction profiles.

Each supported chat site is described by one `SiteProfile` record: which
selectors locate turns, titles and content, which attributes carry roles
and ids, and which markers mean a reply is still being generated. Adding
a markup variant means editing a record, not the extractor.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pagelogue.types import Site

ROLE_ATTRIBUTES = ("data-message-author-role", "data-author", "data-role", "role")


@dataclass(frozen=True)
class SiteProfile:
    site: Site
    default_title: str
    title_selectors: tuple[str, ...]
    # First selector yielding any nodes wins.
    turn_selectors: tuple[str, ...]
    content_selectors: tuple[str, ...] = ()
    role_attributes: tuple[str, ...] = ROLE_ATTRIBUTES
    user_class_hints: tuple[str, ...] = ("user",)
    assistant_class_hints: tuple[str, ...] = ("assistant",)
    message_id_attributes: tuple[str, ...] = ("data-message-id", "data-id", "id")
    parent_id_attributes: tuple[str, ...] = ("data-parent-id", "data-parent", "data-reply-to")
    model_attributes: tuple[str, ...] = ("data-message-model-slug", "data-model")
    timestamp_selectors: tuple[str, ...] = ("time[datetime]", "[data-timestamp]")
    in_progress_selectors: tuple[str, ...] = ()
    conversation_id_pattern: re.Pattern[str] | None = None

    def conversation_id_from_path(self, path: str) -> str | None:
        if self.conversation_id_pattern is None:
            return None
        match = self.conversation_id_pattern.search(path or "")
        return match.group(1) if match else None


CHATGPT = SiteProfile(
    site=Site.CHATGPT,
    default_title="ChatGPT Conversation",
    title_selectors=('[data-testid="conversation-title"]', ".conversation-title", "h1", "title"),
    turn_selectors=(
        '[data-testid^="conversation-turn"]',
        "[data-message-author-role]",
        ".group.w-full",
        ".conversation-turn",
    ),
    content_selectors=(".markdown", ".whitespace-pre-wrap", ".message-content", "div[data-message-content]"),
    in_progress_selectors=(".result-streaming", ".typing-indicator", '[data-testid*="typing"]', ".generating"),
    conversation_id_pattern=re.compile(r"/c/([A-Za-z0-9-]+)"),
)

CLAUDE = SiteProfile(
    site=Site.CLAUDE,
    default_title="Claude Conversation",
    title_selectors=('[data-testid="chat-title-button"]', ".conversation-title", "title"),
    turn_selectors=(
        '[data-testid="user-message"], .font-claude-message, .font-claude-response',
        "[data-message-author-role]",
    ),
    content_selectors=(".message-content",),
    user_class_hints=("font-user-message", "user-message", "user"),
    assistant_class_hints=("font-claude-message", "font-claude-response", "claude", "assistant"),
    in_progress_selectors=('[data-is-streaming="true"]', ".typing-indicator"),
    conversation_id_pattern=re.compile(r"/chat/([A-Za-z0-9-]+)"),
)

GEMINI = SiteProfile(
    site=Site.GEMINI,
    default_title="Gemini Conversation",
    title_selectors=(".conversation-title", '[data-test-id="conversation-title"]', "title"),
    turn_selectors=("user-query, model-response", "[data-message-author-role]"),
    content_selectors=(".query-text", "message-content", ".markdown"),
    user_class_hints=("user-query", "user"),
    assistant_class_hints=("model-response", "response-container", "assistant"),
    in_progress_selectors=('model-response [aria-busy="true"]', ".loading-indicator", "pending-request"),
    conversation_id_pattern=re.compile(r"/app/([A-Za-z0-9_-]+)"),
)

PROFILES: dict[Site, SiteProfile] = {profile.site: profile for profile in (CHATGPT, CLAUDE, GEMINI)}


def get_profile(site: Site) -> SiteProfile:
    return PROFILES[site]


__all__ = ["ROLE_ATTRIBUTES", "SiteProfile", "CHATGPT", "CLAUDE", "GEMINI", "PROFILES", "get_profile"]
