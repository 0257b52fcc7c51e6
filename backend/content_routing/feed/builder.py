"""Feed cursor builder - paginated, locale-resolved listings of one kind."""

import logging

from backend.content_routing.config import Settings, get_settings
from backend.content_routing.db.repositories import TranslationStore
from backend.content_routing.feed.cursor import FeedCursor, filter_signature
from backend.content_routing.models.common import DocumentKind, Locale
from backend.content_routing.models.feed import FeedFilters, FeedPage
from backend.content_routing.resolution.translations import resolve
from backend.content_routing.utils.metrics import PrometheusContentMetrics

logger = logging.getLogger(__name__)


class FeedBuilder:
    """Builds keyset-paginated feed pages from a TranslationStore.

    Order is fixed to published_at descending, then document id descending.
    Every row is resolved against the listing's locale, not its own base locale.
    """

    def __init__(
        self,
        store: TranslationStore,
        *,
        default_page_size: int = 20,
        max_page_size: int = 50,
        metrics: PrometheusContentMetrics | None = None,
    ) -> None:
        self._store = store
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self._metrics = metrics or PrometheusContentMetrics()

    @classmethod
    def from_settings(
        cls, store: TranslationStore, settings: Settings | None = None
    ) -> "FeedBuilder":
        """Build a feed builder configured from Settings."""
        settings = settings or get_settings()
        return cls(
            store,
            default_page_size=settings.feed_page_size,
            max_page_size=settings.feed_max_page_size,
        )

    def page_size(self, requested: int | None) -> int:
        """Clamp a requested page size into [1, max_page_size]."""
        if requested is None:
            return self._default_page_size
        return max(1, min(requested, self._max_page_size))

    async def list_documents(
        self,
        kind: DocumentKind,
        locale: Locale,
        filters: FeedFilters | None = None,
        cursor: str | None = None,
        page_size: int | None = None,
    ) -> FeedPage:
        """List one page of published documents.

        Args:
            kind: Document kind
            locale: Listing locale every row is resolved against
            filters: Conjunctive filters (none by default)
            cursor: Opaque cursor from the previous page's next_cursor
            page_size: Requested page size, clamped to the configured maximum

        Returns:
            FeedPage; has_more is True exactly when the page is full

        Raises:
            InvalidCursorError: If the cursor is malformed or issued for other filters
            StorageError: If the store fails
        """
        filters = filters or FeedFilters()
        limit = self.page_size(page_size)

        after = None
        if cursor:
            decoded = FeedCursor.decode(cursor)
            decoded.check(kind, filters)
            after = decoded.position

        documents = await self._store.query_documents(kind, filters, after=after, limit=limit)

        items = []
        for document in documents:
            translations = await self._store.load_translations(document.id)
            items.append(resolve(document, translations, locale))

        has_more = len(items) == limit
        next_cursor = None
        if has_more:
            last = documents[-1]
            next_cursor = FeedCursor(
                published_at=last.published_at,
                document_id=last.id,
                signature=filter_signature(kind, filters),
            ).encode()

        self._metrics.inc_feed_page(kind.value)
        logger.debug(
            f"[feed] kind={kind.value} locale={locale} items={len(items)} has_more={has_more}"
        )

        return FeedPage(items=items, next_cursor=next_cursor, has_more=has_more)
