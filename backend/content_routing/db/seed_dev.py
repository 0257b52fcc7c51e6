"""Dev seeding: a few multilingual documents to click through locally."""

import asyncio
import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from backend.content_routing.db.engine import get_async_engine
from backend.content_routing.db.models import Base
from backend.content_routing.db.sql_repositories import SqlContentStore
from backend.content_routing.models import Document, DocumentKind, Translation

# Fixed IDs so re-seeding updates rather than duplicates
DEV_CATEGORY_ID = uuid.UUID("00000000-0000-0000-0000-000000000101")
DEV_ARTICLE_ID = uuid.UUID("00000000-0000-0000-0000-000000000201")
DEV_LEGAL_PAGE_ID = uuid.UUID("00000000-0000-0000-0000-000000000301")


def dev_documents() -> list[tuple[Document, list[Translation]]]:
    """Documents and translations created by seed_dev_content()."""
    category = Document(
        id=DEV_CATEGORY_ID,
        kind=DocumentKind.category,
        base_locale="ka",
        base_title="სისხლის სამართალი",
        base_slug="სისხლის-სამართალი",
        published_at=datetime(2024, 1, 1),
    )
    article = Document(
        id=DEV_ARTICLE_ID,
        kind=DocumentKind.article,
        base_locale="ka",
        base_title="ახალი კანონი 2024",
        base_slug="ახალი-კანონი-2024",
        base_body="კანონის ტექსტი.",
        base_excerpt="მოკლე აღწერა.",
        category_ids=[DEV_CATEGORY_ID],
        published_at=datetime(2024, 3, 1, 9, 0),
    )
    legal_page = Document(
        id=DEV_LEGAL_PAGE_ID,
        kind=DocumentKind.legal_page,
        base_locale="en",
        base_title="Terms of Service",
        base_slug="terms-of-service",
        base_body="These terms govern the use of the site.",
        published_at=datetime(2024, 1, 15),
    )

    return [
        (
            category,
            [
                Translation(
                    document_id=DEV_CATEGORY_ID,
                    locale="en",
                    title="Criminal Law",
                    slug="criminal-law",
                    body="Criminal law practice area.",
                ),
            ],
        ),
        (
            article,
            [
                Translation(
                    document_id=DEV_ARTICLE_ID,
                    locale="en",
                    title="New Law 2024",
                    slug="new-law-2024",
                    body="The text of the law.",
                    excerpt="Short summary.",
                ),
                # Title only: served with base content, but under its own slug
                Translation(
                    document_id=DEV_ARTICLE_ID,
                    locale="ru",
                    title="Новый закон 2024",
                    slug="новый-закон-2024",
                ),
            ],
        ),
        (legal_page, []),
    ]


async def seed_dev_content() -> None:
    """Create tables if needed and upsert the dev documents.

    This function is idempotent - safe to run multiple times.
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine, expire_on_commit=False) as session:
        store = SqlContentStore(session)
        for document, translations in dev_documents():
            await store.save_document(document)
            for translation in translations:
                await store.save_translation(translation)
            print(f"Seeded {document.kind.value} {document.base_slug}")

    print("✅ Dev seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_dev_content())
