"""Common types and enums shared across all models."""

from enum import Enum


class DocumentKind(str, Enum):
    """Kind of content entity; each kind has its own slug namespace."""

    article = "article"
    legal_page = "legal_page"
    specialist = "specialist"
    company = "company"
    category = "category"
    service = "service"
    practice = "practice"


class DocumentStatus(str, Enum):
    """Publication status of a document."""

    draft = "draft"
    published = "published"


# Locale codes are plain strings ("ka", "en", "ru"); the supported set lives in Settings.
Locale = str
