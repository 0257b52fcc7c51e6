"""Fill in missing translation slugs from translation titles."""

import logging
from collections.abc import Collection

from backend.content_routing.db.repositories import ContentStore
from backend.content_routing.models.common import DocumentKind, Locale
from backend.content_routing.models.content import Document
from backend.content_routing.slugs.generator import generate_slug
from backend.content_routing.slugs.uniqueness import ensure_unique_slug

logger = logging.getLogger(__name__)


async def _slug_taken(
    store: ContentStore, document: Document, locale: Locale, slug: str
) -> bool:
    found = await store.find_by_translation_slug(document.kind, locale, slug)
    if found is not None and found[0] != document.id:
        return True

    base_owner = await store.find_by_base_slug(document.kind, slug)
    return base_owner is not None and base_owner.id != document.id


async def backfill_translation_slug(
    store: ContentStore,
    document: Document,
    locale: Locale,
    unicode_locales: Collection[Locale] | None = None,
) -> str | None:
    """Derive and persist a slug for a titled translation that has none.

    Args:
        store: Content store
        document: Owning document
        locale: Translation locale
        unicode_locales: Passed through to generate_slug

    Returns:
        The new slug, or None if there was nothing to backfill
    """
    translations = await store.load_translations(document.id)
    translation = translations.get(locale)
    if translation is None or translation.has_slug or not translation.title.strip():
        return None

    base = generate_slug(translation.title, locale, unicode_locales)

    async def exists(candidate: str) -> bool:
        return await _slug_taken(store, document, locale, candidate)

    slug = await ensure_unique_slug(base, exists, fallback=document.kind.value)
    await store.save_translation(translation.model_copy(update={"slug": slug}))

    logger.info(
        f"[slug_backfill] kind={document.kind.value} document={document.id} "
        f"locale={locale} slug={slug}"
    )
    return slug


async def backfill_all(
    store: ContentStore,
    kind: DocumentKind,
    unicode_locales: Collection[Locale] | None = None,
) -> int:
    """Backfill every translation of every document of a kind.

    Returns:
        Number of slugs written
    """
    written = 0
    for document in await store.list_documents(kind):
        translations = await store.load_translations(document.id)
        for locale in sorted(translations):
            slug = await backfill_translation_slug(store, document, locale, unicode_locales)
            if slug is not None:
                written += 1

    logger.info(f"[slug_backfill] kind={kind.value} written={written}")
    return written
