"""Integration tests for SqlContentStore on SQLite (aiosqlite)."""

import uuid
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from backend.content_routing.db.repositories import FeedPosition, SlugCollisionError, StorageError
from backend.content_routing.db.sql_repositories import SqlContentStore
from backend.content_routing.feed.builder import FeedBuilder
from backend.content_routing.models import (
    DocumentKind,
    DocumentStatus,
    FeedFilters,
    Redirect,
    ResolvedPage,
)
from backend.content_routing.resolution.canonical import CanonicalResolver
from tests.factories import make_document, make_translation, minutes_after_epoch, seed

ARTICLE = DocumentKind.article


class TestReads:
    """Lookups and projections."""

    @pytest.mark.asyncio
    async def test_document_round_trip(self, sql_store: SqlContentStore) -> None:
        category_ids = sorted([uuid.uuid4(), uuid.uuid4()])
        author_id = uuid.uuid4()
        document = make_document(
            "ახალი-კანონი",
            base_locale="ka",
            title="ახალი კანონი",
            author_id=author_id,
            category_ids=category_ids,
            published_at=datetime(2024, 3, 1, 9, 30),
        )
        await seed(sql_store, document)

        loaded = await sql_store.load_document(document.id)

        assert loaded is not None
        assert loaded.base_slug == "ახალი-კანონი"
        assert loaded.base_title == "ახალი კანონი"
        assert loaded.author_id == author_id
        assert loaded.category_ids == category_ids
        assert loaded.published_at == datetime(2024, 3, 1, 9, 30)
        assert loaded.created_at is not None

    @pytest.mark.asyncio
    async def test_translations_keyed_by_locale(self, sql_store: SqlContentStore) -> None:
        document = make_document("news-item")
        await seed(
            sql_store,
            document,
            make_translation(document, "ru", title="Новость", slug="novost", body="Текст"),
            make_translation(document, "ka", title="სიახლე"),
        )

        translations = await sql_store.load_translations(document.id)

        assert set(translations) == {"ru", "ka"}
        assert translations["ru"].slug == "novost"
        assert translations["ka"].slug == ""

    @pytest.mark.asyncio
    async def test_slug_lookups(self, sql_store: SqlContentStore) -> None:
        document = make_document("news-item")
        await seed(sql_store, document, make_translation(document, "ru", slug="novost"))

        by_base = await sql_store.find_by_base_slug(ARTICLE, "news-item")
        by_translation = await sql_store.find_by_translation_slug(ARTICLE, "ru", "novost")

        assert by_base is not None and by_base.id == document.id
        assert by_translation is not None and by_translation[0] == document.id
        assert await sql_store.find_by_translation_slug(ARTICLE, "ka", "novost") is None
        assert await sql_store.find_by_base_slug(DocumentKind.legal_page, "news-item") is None

    @pytest.mark.asyncio
    async def test_empty_translation_slugs_do_not_collide(
        self, sql_store: SqlContentStore
    ) -> None:
        first = make_document("first")
        second = make_document("second")
        await seed(sql_store, first, make_translation(first, "ru", title="Первый"))
        await seed(sql_store, second, make_translation(second, "ru", title="Второй"))

        assert await sql_store.find_by_translation_slug(ARTICLE, "ru", "") is None

    @pytest.mark.asyncio
    async def test_malformed_row_is_a_storage_error(self, sqlite_engine: AsyncEngine) -> None:
        document_id = uuid.uuid4()
        async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
            await session.execute(
                text(
                    "INSERT INTO document "
                    "(id, kind, base_locale, title, slug, body, excerpt, status) "
                    "VALUES (:id, 'article', 'en', 'T', 'bad-row', '', '', 'archived')"
                ),
                {"id": document_id.hex},
            )
            await session.commit()

            with pytest.raises(StorageError):
                await SqlContentStore(session).find_by_base_slug(ARTICLE, "bad-row")

    @pytest.mark.asyncio
    async def test_backend_failure_is_a_storage_error(self, tmp_path: Path) -> None:
        # No tables created
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", poolclass=NullPool
        )
        try:
            async with AsyncSession(engine) as session:
                with pytest.raises(StorageError):
                    await SqlContentStore(session).find_by_base_slug(ARTICLE, "news-item")
        finally:
            await engine.dispose()


class TestFeedQueries:
    """Keyset pagination in SQL."""

    @pytest.mark.asyncio
    async def test_keyset_pages_cover_everything_once(self, sql_store: SqlContentStore) -> None:
        for i in range(12):
            await seed(
                sql_store, make_document(f"article-{i}", published_at=minutes_after_epoch(i))
            )
        for i in range(3):
            await seed(sql_store, make_document(f"tie-{i}", published_at=minutes_after_epoch(5)))

        seen = []
        after = None
        while True:
            page = await sql_store.query_documents(ARTICLE, FeedFilters(), after=after, limit=4)
            seen.extend(page)
            if len(page) < 4:
                break
            after = FeedPosition(published_at=page[-1].published_at, document_id=page[-1].id)

        keys = [(d.published_at, d.id) for d in seen]
        assert len(keys) == 15
        assert len(set(keys)) == 15
        assert keys == sorted(keys, reverse=True)

    @pytest.mark.asyncio
    async def test_filters(self, sql_store: SqlContentStore) -> None:
        category = uuid.uuid4()
        author = uuid.uuid4()
        await seed(
            sql_store,
            make_document(
                "match",
                title="100% Tax_Refund",
                category_ids=[category],
                author_id=author,
                published_at=datetime(2024, 6, 1),
            ),
        )
        await seed(sql_store, make_document("other-category", title="100% Tax_Refund"))
        await seed(
            sql_store,
            make_document("draft", status=DocumentStatus.draft, category_ids=[category]),
        )

        found = await sql_store.query_documents(
            ARTICLE,
            FeedFilters(
                category_id=category,
                author_id=author,
                search="100% TAX_",
                date_from=datetime(2024, 6, 1),
                date_to=datetime(2024, 6, 1),
            ),
        )

        assert [d.base_slug for d in found] == ["match"]

    @pytest.mark.asyncio
    async def test_search_wildcards_are_literal(self, sql_store: SqlContentStore) -> None:
        await seed(sql_store, make_document("plain", title="Tax refund"))

        assert await sql_store.query_documents(ARTICLE, FeedFilters(search="tax_refund")) == []
        assert await sql_store.query_documents(ARTICLE, FeedFilters(search="%")) == []

    @pytest.mark.asyncio
    async def test_feed_builder_over_sql(self, sql_store: SqlContentStore) -> None:
        for i in range(45):
            await seed(
                sql_store, make_document(f"article-{i}", published_at=minutes_after_epoch(i))
            )
        builder = FeedBuilder(sql_store)

        page1 = await builder.list_documents(ARTICLE, "en", page_size=20)
        page2 = await builder.list_documents(ARTICLE, "en", cursor=page1.next_cursor, page_size=20)
        page3 = await builder.list_documents(ARTICLE, "en", cursor=page2.next_cursor, page_size=20)

        assert [len(p.items) for p in (page1, page2, page3)] == [20, 20, 5]
        assert page3.has_more is False
        assert page1.items[0].slug == "article-44"
        assert page3.items[-1].slug == "article-0"


class TestWrites:
    """Upserts, collisions and cascades."""

    @pytest.mark.asyncio
    async def test_upserts_update_in_place(self, sql_store: SqlContentStore) -> None:
        document = make_document("news-item")
        await seed(sql_store, document, make_translation(document, "ru", slug="novost"))

        await sql_store.save_document(document.model_copy(update={"base_title": "Updated"}))
        await sql_store.save_translation(
            make_translation(document, "ru", title="Новость", slug="novost", body="Текст")
        )

        loaded = await sql_store.load_document(document.id)
        translations = await sql_store.load_translations(document.id)
        assert loaded is not None and loaded.base_title == "Updated"
        assert translations["ru"].title == "Новость"
        assert len(await sql_store.list_documents(ARTICLE)) == 1

    @pytest.mark.asyncio
    async def test_base_slug_collision(self, sql_store: SqlContentStore) -> None:
        await seed(sql_store, make_document("news-item"))

        with pytest.raises(SlugCollisionError):
            await sql_store.save_document(make_document("news-item"))

    @pytest.mark.asyncio
    async def test_translation_slug_collisions(self, sql_store: SqlContentStore) -> None:
        first = make_document("first")
        second = make_document("second")
        await seed(sql_store, first, make_translation(first, "ru", slug="novost"))
        await seed(sql_store, second)

        with pytest.raises(SlugCollisionError):
            await sql_store.save_translation(make_translation(second, "ru", slug="novost"))
        with pytest.raises(SlugCollisionError):
            await sql_store.save_translation(make_translation(second, "ru", slug="first"))

        await sql_store.save_translation(make_translation(second, "ka", slug="novost"))

    @pytest.mark.asyncio
    async def test_delete_document_cascades(self, sql_store: SqlContentStore) -> None:
        document = make_document("news-item", category_ids=[uuid.uuid4()])
        await seed(sql_store, document, make_translation(document, "ru", slug="novost"))
        await sql_store.save_translation(make_translation(document, "ru", slug="novaya"))

        assert await sql_store.delete_document(document.id) is True

        assert await sql_store.load_document(document.id) is None
        assert await sql_store.load_translations(document.id) == {}
        assert await sql_store.find_by_retired_slug(ARTICLE, "ru", "novost") is None
        assert await sql_store.delete_document(document.id) is False

    @pytest.mark.asyncio
    async def test_delete_translation(self, sql_store: SqlContentStore) -> None:
        document = make_document("news-item")
        await seed(sql_store, document, make_translation(document, "ru", slug="novost"))

        assert await sql_store.delete_translation(document.id, "ru") is True
        assert await sql_store.delete_translation(document.id, "ru") is False
        assert await sql_store.load_document(document.id) is not None


class TestRetiredSlugs:
    """Renames keep old URLs working through redirects."""

    @pytest.mark.asyncio
    async def test_renamed_translation_slug_redirects(
        self, sql_store: SqlContentStore
    ) -> None:
        document = make_document("news-item")
        await seed(sql_store, document, make_translation(document, "ru", slug="staraya-ssylka"))
        await sql_store.save_translation(make_translation(document, "ru", slug="novaya-ssylka"))

        resolver = CanonicalResolver(
            sql_store, supported_locales=["ka", "en", "ru"], kind_paths={"article": "news"}
        )
        stale = await resolver.resolve_request(ARTICLE, "ru", "staraya-ssylka")
        current = await resolver.resolve_request(ARTICLE, "ru", "novaya-ssylka")

        assert isinstance(stale, Redirect)
        assert stale.location == "/ru/news/novaya-ssylka"
        assert isinstance(current, ResolvedPage)

    @pytest.mark.asyncio
    async def test_latest_owner_of_a_retired_slug_wins(
        self, sql_store: SqlContentStore
    ) -> None:
        first = await seed(sql_store, make_document("shared"))
        await sql_store.save_document(first.model_copy(update={"base_slug": "first"}))
        second = await seed(sql_store, make_document("shared"))
        await sql_store.save_document(second.model_copy(update={"base_slug": "second"}))

        assert await sql_store.find_by_retired_slug(ARTICLE, None, "shared") == second.id

    @pytest.mark.asyncio
    async def test_deleted_translation_slug_redirects_to_base_slug(
        self, sql_store: SqlContentStore
    ) -> None:
        document = make_document("news-item")
        await seed(sql_store, document, make_translation(document, "ru", slug="novost"))
        await sql_store.delete_translation(document.id, "ru")

        resolver = CanonicalResolver(
            sql_store, supported_locales=["ka", "en", "ru"], kind_paths={"article": "news"}
        )
        result = await resolver.resolve_request(ARTICLE, "ru", "novost")

        assert await sql_store.find_by_retired_slug(ARTICLE, "ru", "novost") == document.id
        assert isinstance(result, Redirect)
        assert result.location == "/ru/news/news-item"
