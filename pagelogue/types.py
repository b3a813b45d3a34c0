"""Enums for pagelogue."""
from __future__ import annotations

from enum import Enum
from urllib.parse import urlparse

from pagelogue.errors import UnsupportedFormatError


class Site(str, Enum):
    """Supported chat sites."""
    CHATGPT = "chatgpt"
    CLAUDE = "claude"
    GEMINI = "gemini"

    @classmethod
    def from_string(cls, value: str | None) -> Site | None:
        """Normalize a site string to the enum, or None if unknown."""
        if not value:
            return None
        normalized = value.lower().strip()
        # Handle aliases
        if normalized in ("gpt", "openai"):
            return cls.CHATGPT
        if normalized in ("claude-ai", "anthropic"):
            return cls.CLAUDE
        if normalized == "bard":
            return cls.GEMINI
        try:
            return cls(normalized)
        except ValueError:
            return None

    @classmethod
    def from_url(cls, url: str | None) -> Site | None:
        """Detect the site from a page URL's hostname."""
        if not url:
            return None
        host = (urlparse(url).hostname or "").lower()
        if host in ("chatgpt.com", "chat.openai.com") or host.endswith(".chatgpt.com"):
            return cls.CHATGPT
        if host == "claude.ai" or host.endswith(".claude.ai"):
            return cls.CLAUDE
        if host == "gemini.google.com":
            return cls.GEMINI
        return None

    def __str__(self) -> str:
        return self.value


class ExportFormat(str, Enum):
    """Output encodings produced by the renderer."""
    MARKDOWN = "markdown"
    JSON = "json"
    TXT = "txt"
    CSV = "csv"

    @classmethod
    def parse(cls, value: str | ExportFormat) -> ExportFormat:
        """Resolve a format name, raising UnsupportedFormatError for unknown ones."""
        if isinstance(value, cls):
            return value
        normalized = str(value).lower().strip()
        if normalized in ("md",):
            return cls.MARKDOWN
        if normalized in ("text", "plain"):
            return cls.TXT
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormatError(value) from None

    @property
    def extension(self) -> str:
        return "md" if self is ExportFormat.MARKDOWN else self.value

    def __str__(self) -> str:
        return self.value
