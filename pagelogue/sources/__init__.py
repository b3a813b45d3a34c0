"""Page access and conversation extraction."""

from pagelogue.sources.accessor import DocumentAccessor, HtmlPageAccessor
from pagelogue.sources.extractor import ConversationExtractor, ExtractionResult
from pagelogue.sources.sites import PROFILES, SiteProfile, get_profile

__all__ = [
    "DocumentAccessor",
    "HtmlPageAccessor",
    "ConversationExtractor",
    "ExtractionResult",
    "PROFILES",
    "SiteProfile",
    "get_profile",
]
