"""Unit tests for the in-memory content store."""

from uuid import uuid4

import pytest

from backend.content_routing.db.inmemory import InMemoryContentStore
from backend.content_routing.db.repositories import SlugCollisionError
from backend.content_routing.models import DocumentKind
from tests.factories import make_document, make_translation, seed

ARTICLE = DocumentKind.article


class TestLookups:
    """Absence is None, never an exception."""

    @pytest.mark.asyncio
    async def test_missing_rows(self, memory_store: InMemoryContentStore) -> None:
        assert await memory_store.load_document(uuid4()) is None
        assert await memory_store.load_translations(uuid4()) == {}
        assert await memory_store.find_by_base_slug(ARTICLE, "x") is None
        assert await memory_store.find_by_translation_slug(ARTICLE, "ru", "x") is None
        assert await memory_store.find_by_retired_slug(ARTICLE, None, "x") is None

    @pytest.mark.asyncio
    async def test_empty_translation_slug_never_matches(
        self, memory_store: InMemoryContentStore
    ) -> None:
        document = make_document("news-item")
        await seed(memory_store, document, make_translation(document, "ru", title="Новость"))

        assert await memory_store.find_by_translation_slug(ARTICLE, "ru", "") is None

    @pytest.mark.asyncio
    async def test_translation_lookup_is_kind_and_locale_scoped(
        self, memory_store: InMemoryContentStore
    ) -> None:
        document = make_document("news-item")
        await seed(memory_store, document, make_translation(document, "ru", slug="novost"))

        found = await memory_store.find_by_translation_slug(ARTICLE, "ru", "novost")

        assert found is not None
        assert found[0] == document.id
        assert await memory_store.find_by_translation_slug(ARTICLE, "ka", "novost") is None
        assert (
            await memory_store.find_by_translation_slug(DocumentKind.legal_page, "ru", "novost")
            is None
        )

    @pytest.mark.asyncio
    async def test_stored_documents_are_copies(self, memory_store: InMemoryContentStore) -> None:
        document = await seed(memory_store, make_document("news-item"))
        document.base_title = "Changed after save"

        stored = await memory_store.load_document(document.id)

        assert stored is not None
        assert stored.base_title == "News Item"


class TestCollisions:
    """Explicit slugs are rejected, not renamed."""

    @pytest.mark.asyncio
    async def test_duplicate_base_slug(self, memory_store: InMemoryContentStore) -> None:
        await seed(memory_store, make_document("news-item"))

        with pytest.raises(SlugCollisionError):
            await memory_store.save_document(make_document("news-item"))

    @pytest.mark.asyncio
    async def test_same_base_slug_in_other_kind_is_allowed(
        self, memory_store: InMemoryContentStore
    ) -> None:
        await seed(memory_store, make_document("about"))
        await seed(memory_store, make_document("about", kind=DocumentKind.legal_page))

        assert await memory_store.find_by_base_slug(DocumentKind.legal_page, "about") is not None

    @pytest.mark.asyncio
    async def test_duplicate_translation_slug_in_locale(
        self, memory_store: InMemoryContentStore
    ) -> None:
        first = make_document("first")
        second = make_document("second")
        await seed(memory_store, first, make_translation(first, "ru", slug="novost"))
        await seed(memory_store, second)

        with pytest.raises(SlugCollisionError) as exc_info:
            await memory_store.save_translation(make_translation(second, "ru", slug="novost"))

        assert exc_info.value.locale == "ru"
        assert exc_info.value.slug == "novost"

    @pytest.mark.asyncio
    async def test_translation_slug_may_repeat_across_locales(
        self, memory_store: InMemoryContentStore
    ) -> None:
        first = make_document("first")
        second = make_document("second")
        await seed(memory_store, first, make_translation(first, "ru", slug="zakon"))

        await seed(memory_store, second, make_translation(second, "ka", slug="zakon"))

    @pytest.mark.asyncio
    async def test_translation_slug_may_not_shadow_a_base_slug(
        self, memory_store: InMemoryContentStore
    ) -> None:
        await seed(memory_store, make_document("first"))
        second = await seed(memory_store, make_document("second"))

        with pytest.raises(SlugCollisionError):
            await memory_store.save_translation(make_translation(second, "ru", slug="first"))

    @pytest.mark.asyncio
    async def test_base_slug_may_not_shadow_a_translation_slug(
        self, memory_store: InMemoryContentStore
    ) -> None:
        first = make_document("first")
        await seed(memory_store, first, make_translation(first, "ru", slug="novost"))

        with pytest.raises(SlugCollisionError):
            await memory_store.save_document(make_document("novost"))

    @pytest.mark.asyncio
    async def test_translation_for_base_locale_is_rejected(
        self, memory_store: InMemoryContentStore
    ) -> None:
        document = await seed(memory_store, make_document("news-item"))

        with pytest.raises(ValueError):
            await memory_store.save_translation(make_translation(document, "en", slug="x"))

    @pytest.mark.asyncio
    async def test_translation_for_missing_document_is_rejected(
        self, memory_store: InMemoryContentStore
    ) -> None:
        orphan = make_document("orphan")

        with pytest.raises(ValueError):
            await memory_store.save_translation(make_translation(orphan, "ru", slug="x"))


class TestDeletes:
    """Cascade from document to translations."""

    @pytest.mark.asyncio
    async def test_delete_document_cascades(self, memory_store: InMemoryContentStore) -> None:
        document = make_document("news-item")
        await seed(memory_store, document, make_translation(document, "ru", slug="novost"))
        await memory_store.save_translation(make_translation(document, "ru", slug="novaya"))

        assert await memory_store.delete_document(document.id) is True

        assert await memory_store.load_translations(document.id) == {}
        assert await memory_store.find_by_translation_slug(ARTICLE, "ru", "novaya") is None
        assert await memory_store.find_by_retired_slug(ARTICLE, "ru", "novost") is None
        assert await memory_store.delete_document(document.id) is False

    @pytest.mark.asyncio
    async def test_delete_translation_keeps_document(
        self, memory_store: InMemoryContentStore
    ) -> None:
        document = make_document("news-item")
        await seed(memory_store, document, make_translation(document, "ru", slug="novost"))

        assert await memory_store.delete_translation(document.id, "ru") is True
        assert await memory_store.delete_translation(document.id, "ru") is False
        assert await memory_store.load_document(document.id) is not None
        assert await memory_store.find_by_retired_slug(ARTICLE, "ru", "novost") == document.id


class TestRetiredSlugs:
    """Slug changes leave redirects behind."""

    @pytest.mark.asyncio
    async def test_slug_changes_are_recorded(self, memory_store: InMemoryContentStore) -> None:
        document = make_document("news-item")
        await seed(memory_store, document, make_translation(document, "ru", slug="novost"))

        await memory_store.save_document(document.model_copy(update={"base_slug": "news-story"}))
        await memory_store.save_translation(make_translation(document, "ru", slug="novaya"))

        assert await memory_store.find_by_retired_slug(ARTICLE, None, "news-item") == document.id
        assert await memory_store.find_by_retired_slug(ARTICLE, "ru", "novost") == document.id
        assert await memory_store.find_by_retired_slug(ARTICLE, "ka", "novost") is None

    @pytest.mark.asyncio
    async def test_unchanged_slug_is_not_retired(self, memory_store: InMemoryContentStore) -> None:
        document = await seed(memory_store, make_document("news-item"))

        await memory_store.save_document(document.model_copy(update={"base_title": "Renamed"}))

        assert await memory_store.find_by_retired_slug(ARTICLE, None, "news-item") is None
