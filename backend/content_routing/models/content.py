"""Content domain models: documents, translations and resolved views."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from backend.content_routing.models.common import DocumentKind, DocumentStatus, Locale


class Document(BaseModel):
    """Content entity authored in its base locale.

    Base-locale content lives directly on the document, never in a translation row.
    """

    id: UUID = Field(default_factory=uuid4)
    kind: DocumentKind
    base_locale: Locale
    base_title: str
    base_slug: str
    base_body: str = ""
    base_excerpt: str = ""
    status: DocumentStatus = DocumentStatus.published
    author_id: UUID | None = None
    category_ids: list[UUID] = Field(default_factory=list)
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("base_slug")
    @classmethod
    def strip_base_slug(cls, v: str) -> str:
        return v.strip()

    @property
    def is_published(self) -> bool:
        return self.status == DocumentStatus.published


class Translation(BaseModel):
    """Per-locale translation of a document (never for the document's base locale)."""

    document_id: UUID
    locale: Locale
    title: str = ""
    slug: str = ""
    body: str = ""
    excerpt: str = ""
    meta_title: str | None = None
    meta_description: str | None = None

    @field_validator("slug")
    @classmethod
    def strip_slug(cls, v: str) -> str:
        return v.strip()

    @property
    def is_complete(self) -> bool:
        """Title and body are both present."""
        return bool(self.title.strip()) and bool(self.body.strip())

    @property
    def has_slug(self) -> bool:
        return bool(self.slug.strip())


class ResolvedView(BaseModel):
    """Transient projection of a document for one locale.

    is_fallback=True means base-locale content was substituted wholesale.
    """

    document_id: UUID
    kind: DocumentKind
    locale: Locale
    title: str
    slug: str
    excerpt: str
    body: str
    is_fallback: bool
    meta_title: str | None = None
    meta_description: str | None = None
    published_at: datetime | None = None
