"""Document accessor protocol and an HTML-snapshot implementation.

The extractor only ever talks to a `DocumentAccessor`. It never builds one:
callers pass in whatever gives access to the rendered page. Nodes are
BeautifulSoup `Tag` objects, which lets tests and the CLI share one node
type with any real page source.

Every accessor method is awaitable; these calls are the suspension points
of an extraction.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag


@runtime_checkable
class DocumentAccessor(Protocol):
    """Read-only access to a rendered chat page.

    Implementations may raise any exception; the extractor converts them
    into ExtractionError.
    """

    async def query_one(self, selector: str) -> Tag | None:
        """Return the first node matching a CSS selector, or None."""
        ...

    async def query_all(self, selector: str) -> list[Tag]:
        """Return all nodes matching a CSS selector in document order."""
        ...

    async def page_url(self) -> str:
        """Return the URL of the page."""
        ...

    async def page_language(self) -> str | None:
        """Return the page's declared language, if any."""
        ...


class HtmlPageAccessor:
    """Accessor over a saved HTML page (e.g. "Save page as..." output)."""

    def __init__(self, html: str, url: str | None = None, *, parser: str = "html.parser") -> None:
        self._soup = BeautifulSoup(html, parser)
        self._url = url

    @classmethod
    def from_path(cls, path: Path, url: str | None = None) -> HtmlPageAccessor:
        return cls(path.read_text(encoding="utf-8", errors="replace"), url=url)

    async def query_one(self, selector: str) -> Tag | None:
        return self._soup.select_one(selector)

    async def query_all(self, selector: str) -> list[Tag]:
        return list(self._soup.select(selector))

    async def page_url(self) -> str:
        if self._url:
            return self._url
        canonical = self._soup.select_one('link[rel="canonical"][href]')
        if canonical is not None:
            return str(canonical["href"])
        og_url = self._soup.select_one('meta[property="og:url"][content]')
        if og_url is not None:
            return str(og_url["content"])
        return ""

    async def page_language(self) -> str | None:
        html = self._soup.find("html")
        if isinstance(html, Tag):
            lang = html.get("lang")
            if isinstance(lang, str) and lang.strip():
                return lang.strip()
        return None


__all__ = ["DocumentAccessor", "HtmlPageAccessor"]
