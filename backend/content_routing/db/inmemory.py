"""In-memory implementation of the content store."""

from uuid import UUID

from backend.content_routing.db.repositories import FeedPosition, SlugCollisionError
from backend.content_routing.models.common import DocumentKind, Locale
from backend.content_routing.models.content import Document, Translation
from backend.content_routing.models.feed import FeedFilters


def matches_filters(document: Document, filters: FeedFilters) -> bool:
    """Check a published document against conjunctive feed filters."""
    if filters.category_id is not None and filters.category_id not in document.category_ids:
        return False

    if filters.author_id is not None and document.author_id != filters.author_id:
        return False

    if filters.date_from is not None and (
        document.published_at is None or document.published_at < filters.date_from
    ):
        return False

    if filters.date_to is not None and (
        document.published_at is None or document.published_at > filters.date_to
    ):
        return False

    term = (filters.search or "").strip().lower()
    if term:
        haystacks = (document.base_title, document.base_excerpt, document.base_body)
        if not any(term in text.lower() for text in haystacks):
            return False

    return True


def _feed_key(document: Document) -> tuple:
    return (document.published_at, document.id)


class InMemoryContentStore:
    """In-memory implementation of ContentStore."""

    def __init__(self) -> None:
        self._documents: dict[UUID, Document] = {}
        self._translations: dict[UUID, dict[Locale, Translation]] = {}
        self._retired: dict[tuple[DocumentKind, Locale | None, str], UUID] = {}

    async def load_document(self, document_id: UUID) -> Document | None:
        """Get a document by ID."""
        return self._documents.get(document_id)

    async def load_translations(self, document_id: UUID) -> dict[Locale, Translation]:
        """Get all translations of a document keyed by locale."""
        return dict(self._translations.get(document_id, {}))

    async def find_by_base_slug(self, kind: DocumentKind, slug: str) -> Document | None:
        """Find a document of a kind by its base slug."""
        for document in self._documents.values():
            if document.kind == kind and document.base_slug == slug:
                return document
        return None

    async def find_by_translation_slug(
        self, kind: DocumentKind, locale: Locale, slug: str
    ) -> tuple[UUID, Translation] | None:
        """Find a translation by slug within one (kind, locale) namespace."""
        if not slug:
            return None

        for document_id, by_locale in self._translations.items():
            document = self._documents.get(document_id)
            if document is None or document.kind != kind:
                continue
            translation = by_locale.get(locale)
            if translation is not None and translation.slug == slug:
                return (document_id, translation)
        return None

    async def find_by_retired_slug(
        self, kind: DocumentKind, locale: Locale | None, slug: str
    ) -> UUID | None:
        """Find the document a retired slug last belonged to."""
        return self._retired.get((kind, locale, slug))

    async def query_documents(
        self,
        kind: DocumentKind,
        filters: FeedFilters,
        *,
        after: FeedPosition | None = None,
        limit: int = 20,
    ) -> list[Document]:
        """List published documents in feed order."""
        results = [
            document
            for document in self._documents.values()
            if document.kind == kind
            and document.is_published
            and document.published_at is not None
            and matches_filters(document, filters)
        ]

        # Sort by published_at descending, then id descending
        results.sort(key=_feed_key, reverse=True)

        if after is not None:
            position = (after.published_at, after.document_id)
            results = [document for document in results if _feed_key(document) < position]

        return results[:limit]

    async def list_documents(self, kind: DocumentKind) -> list[Document]:
        """List every document of a kind regardless of status."""
        results = [document for document in self._documents.values() if document.kind == kind]
        results.sort(key=lambda document: document.base_slug)
        return results

    async def save_document(self, document: Document) -> Document:
        """Insert or update a document."""
        for other in self._documents.values():
            if (
                other.id != document.id
                and other.kind == document.kind
                and other.base_slug == document.base_slug
            ):
                raise SlugCollisionError(document.kind, None, document.base_slug)

        for document_id, by_locale in self._translations.items():
            if document_id == document.id:
                continue
            owner = self._documents.get(document_id)
            if owner is None or owner.kind != document.kind:
                continue
            if any(t.slug == document.base_slug for t in by_locale.values()):
                raise SlugCollisionError(document.kind, None, document.base_slug)

        previous = self._documents.get(document.id)
        if previous is not None and previous.base_slug != document.base_slug:
            self._retired[(document.kind, None, previous.base_slug)] = document.id

        stored = document.model_copy(deep=True)
        self._documents[document.id] = stored
        return stored

    async def save_translation(self, translation: Translation) -> Translation:
        """Insert or update the translation for (document_id, locale)."""
        document = self._documents.get(translation.document_id)
        if document is None:
            raise ValueError(f"Document {translation.document_id} does not exist")
        if translation.locale == document.base_locale:
            raise ValueError("Translations cannot target the document's base locale")

        if translation.slug:
            found = await self.find_by_translation_slug(
                document.kind, translation.locale, translation.slug
            )
            if found is not None and found[0] != document.id:
                raise SlugCollisionError(document.kind, translation.locale, translation.slug)

            base_owner = await self.find_by_base_slug(document.kind, translation.slug)
            if base_owner is not None and base_owner.id != document.id:
                raise SlugCollisionError(document.kind, translation.locale, translation.slug)

        previous = self._translations.get(document.id, {}).get(translation.locale)
        if previous is not None and previous.slug and previous.slug != translation.slug:
            self._retired[(document.kind, translation.locale, previous.slug)] = document.id

        stored = translation.model_copy(deep=True)
        self._translations.setdefault(document.id, {})[translation.locale] = stored
        return stored

    async def delete_translation(self, document_id: UUID, locale: Locale) -> bool:
        """Delete one translation, retiring its slug."""
        by_locale = self._translations.get(document_id)
        if not by_locale or locale not in by_locale:
            return False
        previous = by_locale.pop(locale)
        document = self._documents.get(document_id)
        if document is not None and previous.slug:
            self._retired[(document.kind, locale, previous.slug)] = document_id
        return True

    async def delete_document(self, document_id: UUID) -> bool:
        """Delete a document and its translations."""
        if document_id not in self._documents:
            return False
        del self._documents[document_id]
        self._translations.pop(document_id, None)
        self._retired = {
            key: owner for key, owner in self._retired.items() if owner != document_id
        }
        return True
