"""Repository protocol interfaces for content data access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from backend.content_routing.models.common import DocumentKind, Locale
from backend.content_routing.models.content import Document, Translation
from backend.content_routing.models.feed import FeedFilters


class StorageError(Exception):
    """The persistence backend failed or returned something unusable.

    Fatal for the current request. Never converted into "not found".
    """


class SlugCollisionError(ValueError):
    """A slug is already taken in its (kind, locale) namespace."""

    def __init__(self, kind: DocumentKind, locale: Locale | None, slug: str) -> None:
        self.kind = kind
        self.locale = locale
        self.slug = slug
        scope = f"{kind.value}/{locale}" if locale else kind.value
        super().__init__(f"Slug '{slug}' is already taken in {scope}")


@dataclass(frozen=True)
class FeedPosition:
    """Keyset position in the feed order (published_at desc, id desc)."""

    published_at: datetime
    document_id: UUID


class TranslationStore(Protocol):
    """Read side: documents and their per-locale translations.

    Absence is reported as None / empty, never raised. Only backend failures
    raise StorageError.
    """

    async def load_document(self, document_id: UUID) -> Document | None:
        """Get a document by ID.

        Args:
            document_id: Document ID

        Returns:
            Document or None if not found
        """
        ...

    async def load_translations(self, document_id: UUID) -> dict[Locale, Translation]:
        """Get all translations of a document keyed by locale.

        Args:
            document_id: Document ID

        Returns:
            Mapping locale -> translation (empty if none)
        """
        ...

    async def find_by_base_slug(self, kind: DocumentKind, slug: str) -> Document | None:
        """Find a document of a kind by its base slug.

        Args:
            kind: Document kind
            slug: Decoded slug

        Returns:
            Document or None if not found
        """
        ...

    async def find_by_translation_slug(
        self, kind: DocumentKind, locale: Locale, slug: str
    ) -> tuple[UUID, Translation] | None:
        """Find a translation by slug within one (kind, locale) namespace.

        Args:
            kind: Document kind
            locale: Translation locale
            slug: Decoded slug

        Returns:
            (owning document ID, translation) or None if not found
        """
        ...

    async def find_by_retired_slug(
        self, kind: DocumentKind, locale: Locale | None, slug: str
    ) -> UUID | None:
        """Find the document a retired slug last belonged to.

        Args:
            kind: Document kind
            locale: Translation locale, or None for retired base slugs
            slug: Decoded slug

        Returns:
            Document ID or None if the slug was never retired
        """
        ...

    async def query_documents(
        self,
        kind: DocumentKind,
        filters: FeedFilters,
        *,
        after: FeedPosition | None = None,
        limit: int = 20,
    ) -> list[Document]:
        """List published documents in feed order.

        Order is published_at descending, then id descending. Documents
        without published_at are never listed.

        Args:
            kind: Document kind
            filters: Conjunctive filters
            after: Keyset position to resume after (exclusive)
            limit: Maximum number of results

        Returns:
            Documents in feed order
        """
        ...

    async def list_documents(self, kind: DocumentKind) -> list[Document]:
        """List every document of a kind regardless of status.

        Args:
            kind: Document kind

        Returns:
            Documents ordered by base slug
        """
        ...


class ContentStore(TranslationStore, Protocol):
    """Read side plus upsert/delete primitives used by editors and maintenance jobs."""

    async def save_document(self, document: Document) -> Document:
        """Insert or update a document.

        A changed base slug is kept as a retired slug of the document.

        Raises:
            SlugCollisionError: If the base slug is taken by another document of the kind
        """
        ...

    async def save_translation(self, translation: Translation) -> Translation:
        """Insert or update the translation for (document_id, locale).

        A changed translation slug is kept as a retired slug of the document.

        Raises:
            SlugCollisionError: If the slug is taken in the (kind, locale) namespace
                or is the base slug of another document of the kind
            ValueError: If the document is missing or locale is its base locale
        """
        ...

    async def delete_translation(self, document_id: UUID, locale: Locale) -> bool:
        """Delete one translation; the document survives.

        A non-empty slug is kept as a retired slug of the document, so the
        locale falls back to the base slug and old links redirect there.

        Returns:
            True if a row was deleted
        """
        ...

    async def delete_document(self, document_id: UUID) -> bool:
        """Delete a document and, by cascade, all of its translations.

        Returns:
            True if a row was deleted
        """
        ...
