"""Translation resolver - what a document looks like in a given locale."""

from backend.content_routing.models.common import Locale
from backend.content_routing.models.content import Document, ResolvedView, Translation


def canonical_slug(
    document: Document, translations: dict[Locale, Translation], locale: Locale
) -> str:
    """Canonical slug of a document for a locale.

    A non-empty translation slug wins even when the translation's content is
    incomplete; otherwise the base slug.
    """
    if locale == document.base_locale:
        return document.base_slug

    translation = translations.get(locale)
    if translation is not None and translation.has_slug:
        return translation.slug
    return document.base_slug


def resolve(
    document: Document, translations: dict[Locale, Translation], locale: Locale
) -> ResolvedView:
    """Project a document into a locale, falling back to base content.

    Rules:
    1. Requested locale is the base locale -> base fields, not a fallback.
    2. A translation with non-empty title and body exists -> its fields.
    3. Otherwise -> base title/excerpt/body wholesale, is_fallback=True.
       Title, excerpt and body are never mixed between locales.

    The slug is always the canonical slug for the requested locale.

    Args:
        document: Document with base-locale content
        translations: Translations of the document keyed by locale
        locale: Requested locale

    Returns:
        ResolvedView for the requested locale
    """
    slug = canonical_slug(document, translations, locale)

    if locale != document.base_locale:
        translation = translations.get(locale)
        if translation is not None and translation.is_complete:
            return ResolvedView(
                document_id=document.id,
                kind=document.kind,
                locale=locale,
                title=translation.title,
                slug=slug,
                excerpt=translation.excerpt,
                body=translation.body,
                is_fallback=False,
                meta_title=translation.meta_title,
                meta_description=translation.meta_description,
                published_at=document.published_at,
            )

    return ResolvedView(
        document_id=document.id,
        kind=document.kind,
        locale=locale,
        title=document.base_title,
        slug=slug,
        excerpt=document.base_excerpt,
        body=document.base_body,
        is_fallback=locale != document.base_locale,
        published_at=document.published_at,
    )
