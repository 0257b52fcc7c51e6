"""Canonical resolver - inbound (locale, slug) to a view, a redirect, or not-found.

Lookup order:
1. Base slug of the kind (locale-agnostic: base slugs are unique per kind).
2. Translation slug within the requested locale only.
3. Retired translation slug of the requested locale, then retired base slug.

Once a document is found, the canonical slug for the requested locale is
computed; a request made with any other slug, retired ones included, gets
a Redirect to it.
"""

import re
import time
from urllib.parse import unquote

from backend.content_routing.config import Settings, get_settings
from backend.content_routing.db.repositories import StorageError, TranslationStore
from backend.content_routing.models.common import DocumentKind, Locale
from backend.content_routing.models.content import Document, Translation
from backend.content_routing.models.resolution import (
    NotFound,
    Redirect,
    ResolutionResult,
    ResolvedPage,
)
from backend.content_routing.resolution.paths import build_path
from backend.content_routing.resolution.translations import canonical_slug, resolve
from backend.content_routing.utils.logging import StructuredResolutionLogger
from backend.content_routing.utils.metrics import PrometheusContentMetrics

# A "%" not followed by two hex digits
_BAD_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_slug(raw_slug: str) -> str | None:
    """Percent-decode a URL path segment exactly once.

    Returns:
        Decoded slug, or None if the encoding is malformed
    """
    if _BAD_PERCENT.search(raw_slug):
        return None
    try:
        return unquote(raw_slug, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        return None


class CanonicalResolver:
    """Resolves public content requests against a TranslationStore.

    Stateless apart from configuration; safe to share across requests.
    """

    def __init__(
        self,
        store: TranslationStore,
        *,
        supported_locales: list[Locale],
        kind_paths: dict[str, str],
        redirect_permanent: bool = True,
        site_origin: str = "",
        metrics: PrometheusContentMetrics | None = None,
        resolution_logger: StructuredResolutionLogger | None = None,
    ) -> None:
        self._store = store
        self._supported_locales = list(supported_locales)
        self._kind_paths = kind_paths
        self._redirect_permanent = redirect_permanent
        self._site_origin = site_origin.rstrip("/")
        self._metrics = metrics or PrometheusContentMetrics()
        self._logger = resolution_logger or StructuredResolutionLogger()

    @classmethod
    def from_settings(
        cls, store: TranslationStore, settings: Settings | None = None
    ) -> "CanonicalResolver":
        """Build a resolver configured from Settings."""
        settings = settings or get_settings()
        return cls(
            store,
            supported_locales=settings.supported_locales,
            kind_paths=settings.kind_paths,
            redirect_permanent=settings.redirect_permanent,
            site_origin=settings.site_origin,
        )

    async def find_document(
        self, kind: DocumentKind, locale: Locale, slug: str, *, include_retired: bool = True
    ) -> Document | None:
        """Find the document a decoded slug refers to under a locale.

        Current slugs win over retired ones. With include_retired=False only
        current base and translation slugs match.
        """
        document = await self._store.find_by_base_slug(kind, slug)
        if document is not None:
            return document

        found = await self._store.find_by_translation_slug(kind, locale, slug)
        if found is not None:
            document_id, _ = found
            return await self._store.load_document(document_id)

        if not include_retired:
            return None

        document_id = await self._store.find_by_retired_slug(kind, locale, slug)
        if document_id is None:
            document_id = await self._store.find_by_retired_slug(kind, None, slug)
        if document_id is None:
            return None
        return await self._store.load_document(document_id)

    async def resolve_request(
        self, kind: DocumentKind, requested_locale: Locale, raw_slug: str
    ) -> ResolutionResult:
        """Resolve an inbound request.

        Args:
            kind: Document kind from the route
            requested_locale: Locale from the route
            raw_slug: Slug path segment, possibly percent-encoded

        Returns:
            ResolvedPage on a canonical hit, Redirect when the slug is not the
            canonical one for the locale, NotFound otherwise

        Raises:
            StorageError: If the store fails; never mapped to NotFound
        """
        started = time.perf_counter()

        if requested_locale not in self._supported_locales:
            return self._finish(
                kind, requested_locale, raw_slug, started, NotFound(reason="unknown_locale")
            )

        slug = decode_slug(raw_slug)
        if not slug:
            return self._finish(
                kind, requested_locale, raw_slug, started, NotFound(reason="bad_slug")
            )

        try:
            document = await self.find_document(kind, requested_locale, slug)
            if document is None or not document.is_published:
                return self._finish(kind, requested_locale, slug, started, NotFound())

            translations = await self._store.load_translations(document.id)
        except StorageError as e:
            self._logger.log_storage_failure(
                kind=kind.value, locale=requested_locale, slug=slug, error=e
            )
            raise

        canonical = canonical_slug(document, translations, requested_locale)

        if slug != canonical:
            redirect = Redirect(
                canonical_slug=canonical,
                location=build_path(requested_locale, kind, canonical, self._kind_paths),
                permanent=self._redirect_permanent,
            )
            return self._finish(kind, requested_locale, slug, started, redirect)

        view = resolve(document, translations, requested_locale)
        if view.is_fallback:
            self._metrics.inc_fallback(kind.value, requested_locale)

        return self._finish(
            kind, requested_locale, slug, started, ResolvedPage(view=view, canonical_slug=canonical)
        )

    async def translate_slug(
        self,
        kind: DocumentKind,
        raw_slug: str,
        from_locale: Locale,
        to_locale: Locale,
    ) -> str:
        """Map a slug seen under one locale to the canonical slug of another.

        Used by locale switchers. Unknown slugs come back decoded and unchanged.
        """
        slug = decode_slug(raw_slug)
        if slug is None:
            return raw_slug

        document = await self.find_document(kind, from_locale, slug)
        if document is None:
            return slug

        translations = await self._store.load_translations(document.id)
        return canonical_slug(document, translations, to_locale)

    def alternates(
        self, document: Document, translations: dict[Locale, Translation]
    ) -> dict[Locale, str]:
        """Canonical path of a document in every supported locale, in configured order."""
        return {
            locale: build_path(
                locale,
                document.kind,
                canonical_slug(document, translations, locale),
                self._kind_paths,
            )
            for locale in self._supported_locales
        }

    def absolute_alternates(
        self, document: Document, translations: dict[Locale, Translation]
    ) -> dict[Locale, str]:
        """Same as alternates() but prefixed with the site origin (hreflang URLs)."""
        return {
            locale: f"{self._site_origin}{path}"
            for locale, path in self.alternates(document, translations).items()
        }

    def _finish(
        self,
        kind: DocumentKind,
        locale: Locale,
        slug: str,
        started: float,
        result: ResolutionResult,
    ) -> ResolutionResult:
        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_resolution(kind.value, result.outcome, latency_ms)

        canonical = None if isinstance(result, NotFound) else result.canonical_slug
        is_fallback = result.view.is_fallback if isinstance(result, ResolvedPage) else None
        self._logger.log_resolution(
            kind=kind.value,
            locale=locale,
            slug=slug,
            outcome=result.outcome,
            latency_ms=latency_ms,
            canonical_slug=canonical,
            is_fallback=is_fallback,
        )
        return result
