"""SQL implementation of the content store."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from sqlalchemy import and_, delete, func, insert, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from backend.content_routing.db.models import (
    DocumentRow,
    SlugHistoryRow,
    TranslationRow,
    document_category,
)
from backend.content_routing.db.repositories import (
    FeedPosition,
    SlugCollisionError,
    StorageError,
)
from backend.content_routing.models.common import DocumentKind, DocumentStatus, Locale
from backend.content_routing.models.content import Document, Translation
from backend.content_routing.models.feed import FeedFilters

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise backend failures as StorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"[content_store] {operation} failed: {type(e).__name__}")
        raise StorageError(f"{operation} failed") from e


def _to_document(row: DocumentRow, category_ids: list[UUID]) -> Document:
    try:
        return Document(
            id=row.id,
            kind=DocumentKind(row.kind),
            base_locale=row.base_locale,
            base_title=row.title,
            base_slug=row.slug,
            base_body=row.body or "",
            base_excerpt=row.excerpt or "",
            status=DocumentStatus(row.status),
            author_id=row.author_id,
            category_ids=category_ids,
            published_at=row.published_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
    except ValueError as e:
        # Unknown kind/status values mean the row is malformed, not missing
        raise StorageError(f"Malformed document row {row.id}") from e


def _to_translation(row: TranslationRow) -> Translation:
    return Translation(
        document_id=row.document_id,
        locale=row.locale,
        title=row.title or "",
        slug=row.slug or "",
        body=row.body or "",
        excerpt=row.excerpt or "",
        meta_title=row.meta_title,
        meta_description=row.meta_description,
    )


def _retired_key(
    kind: DocumentKind, locale: Locale | None, slug: str
) -> ColumnElement[bool]:
    locale_clause = (
        SlugHistoryRow.locale.is_(None) if locale is None else SlugHistoryRow.locale == locale
    )
    return and_(SlugHistoryRow.kind == kind.value, locale_clause, SlugHistoryRow.slug == slug)


def _filter_clauses(filters: FeedFilters) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = []

    if filters.category_id is not None:
        clauses.append(
            DocumentRow.id.in_(
                select(document_category.c.document_id).where(
                    document_category.c.category_id == filters.category_id
                )
            )
        )

    if filters.author_id is not None:
        clauses.append(DocumentRow.author_id == filters.author_id)

    if filters.date_from is not None:
        clauses.append(DocumentRow.published_at >= filters.date_from)

    if filters.date_to is not None:
        clauses.append(DocumentRow.published_at <= filters.date_to)

    term = (filters.search or "").strip().lower()
    if term:
        clauses.append(
            or_(
                func.lower(DocumentRow.title).contains(term, autoescape=True),
                func.lower(DocumentRow.excerpt).contains(term, autoescape=True),
                func.lower(DocumentRow.body).contains(term, autoescape=True),
            )
        )

    return clauses


class SqlContentStore:
    """SQL implementation of ContentStore."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _category_ids(self, document_ids: list[UUID]) -> dict[UUID, list[UUID]]:
        if not document_ids:
            return {}

        result = await self._session.execute(
            select(document_category.c.document_id, document_category.c.category_id)
            .where(document_category.c.document_id.in_(document_ids))
            .order_by(document_category.c.category_id)
        )

        by_document: dict[UUID, list[UUID]] = {}
        for document_id, category_id in result.all():
            by_document.setdefault(document_id, []).append(category_id)
        return by_document

    async def _to_documents(self, rows: list[DocumentRow]) -> list[Document]:
        categories = await self._category_ids([row.id for row in rows])
        return [_to_document(row, categories.get(row.id, [])) for row in rows]

    async def load_document(self, document_id: UUID) -> Document | None:
        """Get a document by ID."""
        with _storage_errors("load_document"):
            row = await self._session.get(DocumentRow, document_id)
            if row is None:
                return None
            return (await self._to_documents([row]))[0]

    async def load_translations(self, document_id: UUID) -> dict[Locale, Translation]:
        """Get all translations of a document keyed by locale."""
        with _storage_errors("load_translations"):
            result = await self._session.execute(
                select(TranslationRow).where(TranslationRow.document_id == document_id)
            )
            return {row.locale: _to_translation(row) for row in result.scalars().all()}

    async def find_by_base_slug(self, kind: DocumentKind, slug: str) -> Document | None:
        """Find a document of a kind by its base slug."""
        with _storage_errors("find_by_base_slug"):
            result = await self._session.execute(
                select(DocumentRow).where(DocumentRow.kind == kind.value, DocumentRow.slug == slug)
            )
            row = result.scalars().first()
            if row is None:
                return None
            return (await self._to_documents([row]))[0]

    async def find_by_translation_slug(
        self, kind: DocumentKind, locale: Locale, slug: str
    ) -> tuple[UUID, Translation] | None:
        """Find a translation by slug within one (kind, locale) namespace."""
        if not slug:
            return None

        with _storage_errors("find_by_translation_slug"):
            result = await self._session.execute(
                select(TranslationRow).where(
                    TranslationRow.kind == kind.value,
                    TranslationRow.locale == locale,
                    TranslationRow.slug == slug,
                )
            )
            row = result.scalars().first()
            if row is None:
                return None
            return (row.document_id, _to_translation(row))

    async def find_by_retired_slug(
        self, kind: DocumentKind, locale: Locale | None, slug: str
    ) -> UUID | None:
        """Find the document a retired slug last belonged to."""
        with _storage_errors("find_by_retired_slug"):
            result = await self._session.execute(
                select(SlugHistoryRow.document_id)
                .where(_retired_key(kind, locale, slug))
                .order_by(SlugHistoryRow.retired_at.desc())
                .limit(1)
            )
            return result.scalar_one_or_none()

    async def _retire_slug(
        self, kind: DocumentKind, locale: Locale | None, slug: str, document_id: UUID
    ) -> None:
        # Latest owner wins
        await self._session.execute(delete(SlugHistoryRow).where(_retired_key(kind, locale, slug)))
        self._session.add(
            SlugHistoryRow(document_id=document_id, kind=kind.value, locale=locale, slug=slug)
        )

    async def query_documents(
        self,
        kind: DocumentKind,
        filters: FeedFilters,
        *,
        after: FeedPosition | None = None,
        limit: int = 20,
    ) -> list[Document]:
        """List published documents in feed order."""
        query = select(DocumentRow).where(
            DocumentRow.kind == kind.value,
            DocumentRow.status == DocumentStatus.published.value,
            DocumentRow.published_at.is_not(None),
            *_filter_clauses(filters),
        )

        # Keyset: strictly after the last seen (published_at, id)
        if after is not None:
            query = query.where(
                or_(
                    DocumentRow.published_at < after.published_at,
                    and_(
                        DocumentRow.published_at == after.published_at,
                        DocumentRow.id < after.document_id,
                    ),
                )
            )

        query = query.order_by(DocumentRow.published_at.desc(), DocumentRow.id.desc()).limit(limit)

        with _storage_errors("query_documents"):
            result = await self._session.execute(query)
            return await self._to_documents(list(result.scalars().all()))

    async def list_documents(self, kind: DocumentKind) -> list[Document]:
        """List every document of a kind regardless of status."""
        with _storage_errors("list_documents"):
            result = await self._session.execute(
                select(DocumentRow).where(DocumentRow.kind == kind.value).order_by(DocumentRow.slug)
            )
            return await self._to_documents(list(result.scalars().all()))

    async def _translation_slug_owner(
        self, kind: DocumentKind, slug: str, locale: Locale | None = None
    ) -> UUID | None:
        query = select(TranslationRow.document_id).where(
            TranslationRow.kind == kind.value, TranslationRow.slug == slug
        )
        if locale is not None:
            query = query.where(TranslationRow.locale == locale)
        result = await self._session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def save_document(self, document: Document) -> Document:
        """Insert or update a document."""
        with _storage_errors("save_document"):
            base_owner = await self.find_by_base_slug(document.kind, document.base_slug)
            if base_owner is not None and base_owner.id != document.id:
                raise SlugCollisionError(document.kind, None, document.base_slug)

            translation_owner = await self._translation_slug_owner(
                document.kind, document.base_slug
            )
            if translation_owner is not None and translation_owner != document.id:
                raise SlugCollisionError(document.kind, None, document.base_slug)

            row = await self._session.get(DocumentRow, document.id)
            if row is None:
                row = DocumentRow(id=document.id)
                self._session.add(row)
            elif row.slug != document.base_slug:
                await self._retire_slug(document.kind, None, row.slug, document.id)

            row.kind = document.kind.value
            row.base_locale = document.base_locale
            row.title = document.base_title
            row.slug = document.base_slug
            row.body = document.base_body
            row.excerpt = document.base_excerpt
            row.status = document.status.value
            row.author_id = document.author_id
            row.published_at = document.published_at
            row.updated_at = document.updated_at
            if document.created_at is not None:
                row.created_at = document.created_at

            await self._session.execute(
                delete(document_category).where(document_category.c.document_id == document.id)
            )
            if document.category_ids:
                await self._session.execute(
                    insert(document_category),
                    [
                        {"document_id": document.id, "category_id": category_id}
                        for category_id in document.category_ids
                    ],
                )

            try:
                await self._session.commit()
            except IntegrityError as e:
                await self._session.rollback()
                raise SlugCollisionError(document.kind, None, document.base_slug) from e

        return document

    async def save_translation(self, translation: Translation) -> Translation:
        """Insert or update the translation for (document_id, locale)."""
        with _storage_errors("save_translation"):
            document_row = await self._session.get(DocumentRow, translation.document_id)
            if document_row is None:
                raise ValueError(f"Document {translation.document_id} does not exist")
            if translation.locale == document_row.base_locale:
                raise ValueError("Translations cannot target the document's base locale")

            kind = DocumentKind(document_row.kind)

            if translation.slug:
                owner = await self._translation_slug_owner(
                    kind, translation.slug, translation.locale
                )
                if owner is not None and owner != translation.document_id:
                    raise SlugCollisionError(kind, translation.locale, translation.slug)

                base_owner = await self.find_by_base_slug(kind, translation.slug)
                if base_owner is not None and base_owner.id != translation.document_id:
                    raise SlugCollisionError(kind, translation.locale, translation.slug)

            result = await self._session.execute(
                select(TranslationRow).where(
                    TranslationRow.document_id == translation.document_id,
                    TranslationRow.locale == translation.locale,
                )
            )
            row = result.scalars().first()
            if row is None:
                row = TranslationRow(
                    document_id=translation.document_id,
                    kind=kind.value,
                    locale=translation.locale,
                )
                self._session.add(row)
            elif row.slug and row.slug != translation.slug:
                await self._retire_slug(kind, translation.locale, row.slug, translation.document_id)

            row.title = translation.title
            row.slug = translation.slug
            row.body = translation.body
            row.excerpt = translation.excerpt
            row.meta_title = translation.meta_title
            row.meta_description = translation.meta_description

            try:
                await self._session.commit()
            except IntegrityError as e:
                await self._session.rollback()
                raise SlugCollisionError(kind, translation.locale, translation.slug) from e

        return translation

    async def delete_translation(self, document_id: UUID, locale: Locale) -> bool:
        """Delete one translation, retiring its slug."""
        with _storage_errors("delete_translation"):
            result = await self._session.execute(
                select(TranslationRow).where(
                    TranslationRow.document_id == document_id,
                    TranslationRow.locale == locale,
                )
            )
            row = result.scalars().first()
            if row is None:
                return False

            if row.slug:
                await self._retire_slug(DocumentKind(row.kind), locale, row.slug, document_id)
            await self._session.delete(row)
            await self._session.commit()
            return True

    async def delete_document(self, document_id: UUID) -> bool:
        """Delete a document and its translations."""
        with _storage_errors("delete_document"):
            # Explicit child deletes: SQLite does not enforce ON DELETE CASCADE by default
            await self._session.execute(
                delete(TranslationRow).where(TranslationRow.document_id == document_id)
            )
            await self._session.execute(
                delete(document_category).where(document_category.c.document_id == document_id)
            )
            await self._session.execute(
                delete(SlugHistoryRow).where(SlugHistoryRow.document_id == document_id)
            )
            result = await self._session.execute(
                delete(DocumentRow).where(DocumentRow.id == document_id)
            )
            await self._session.commit()
            return bool(result.rowcount)
