"""Models package - re-exports for convenience."""

from backend.content_routing.models.common import DocumentKind, DocumentStatus, Locale
from backend.content_routing.models.content import Document, ResolvedView, Translation
from backend.content_routing.models.feed import FeedFilters, FeedPage
from backend.content_routing.models.resolution import (
    NotFound,
    Redirect,
    ResolutionResult,
    ResolvedPage,
)

__all__ = [
    # Common
    "DocumentKind",
    "DocumentStatus",
    "Locale",
    # Content
    "Document",
    "Translation",
    "ResolvedView",
    # Feed
    "FeedFilters",
    "FeedPage",
    # Resolution
    "ResolvedPage",
    "Redirect",
    "NotFound",
    "ResolutionResult",
]
