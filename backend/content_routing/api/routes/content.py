"""Public content endpoints.

- GET /{locale}/{kind_path}: feed of published documents
- GET /{locale}/{kind_path}/{slug}: one document, or a redirect to its canonical slug
"""

from datetime import datetime
from typing import Annotated
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from backend.content_routing.api.dependencies import get_feed_builder, get_resolver, get_store
from backend.content_routing.config import get_settings
from backend.content_routing.db.repositories import TranslationStore
from backend.content_routing.feed.builder import FeedBuilder
from backend.content_routing.feed.cursor import InvalidCursorError
from backend.content_routing.models.common import DocumentKind
from backend.content_routing.models.content import ResolvedView
from backend.content_routing.models.feed import FeedFilters, FeedPage
from backend.content_routing.models.resolution import Redirect, ResolvedPage
from backend.content_routing.resolution.canonical import CanonicalResolver
from backend.content_routing.resolution.paths import kind_from_path

router = APIRouter(tags=["content"])


class DocumentResponse(BaseModel):
    """Response for GET /{locale}/{kind_path}/{slug}."""

    view: ResolvedView
    canonical_slug: str
    canonical_path: str
    alternates: dict[str, str]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")


def _route_kind(locale: str, kind_path: str) -> DocumentKind:
    settings = get_settings()
    kind = kind_from_path(kind_path, settings.kind_paths)
    if kind is None or not settings.is_locale(locale):
        raise _not_found()
    return kind


def _raw_slug(request: Request, slug: str) -> str:
    # Starlette decodes path params; resolution needs the segment as sent
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1").rstrip("/").rsplit("/", 1)[-1]
    return quote(slug, safe="")


@router.get("/{locale}/{kind_path}", response_model=FeedPage)
async def list_content(
    locale: str,
    kind_path: str,
    feed: Annotated[FeedBuilder, Depends(get_feed_builder)],
    resolver: Annotated[CanonicalResolver, Depends(get_resolver)],
    category: str | None = None,
    author_id: UUID | None = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    cursor: str | None = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> FeedPage:
    """List published documents of a kind, resolved into the requested locale.

    Args:
        category: Category slug (base slug or a translation slug in this locale)
        cursor: next_cursor of the previous page

    Raises:
        HTTPException: 404 for an unknown locale/kind, 400 for a bad cursor
    """
    kind = _route_kind(locale, kind_path)

    category_id = None
    if category:
        category_document = await resolver.find_document(
            DocumentKind.category, locale, category, include_retired=False
        )
        if category_document is None or not category_document.is_published:
            return FeedPage(items=[], next_cursor=None, has_more=False)
        category_id = category_document.id

    filters = FeedFilters(
        category_id=category_id,
        author_id=author_id,
        search=search,
        date_from=date_from,
        date_to=date_to,
    )

    try:
        return await feed.list_documents(kind, locale, filters, cursor=cursor, page_size=limit)
    except InvalidCursorError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/{locale}/{kind_path}/{slug}", response_model=None)
async def get_content(
    request: Request,
    locale: str,
    kind_path: str,
    slug: str,
    resolver: Annotated[CanonicalResolver, Depends(get_resolver)],
    store: Annotated[TranslationStore, Depends(get_store)],
) -> DocumentResponse | RedirectResponse:
    """Resolve one document by (locale, slug).

    Returns:
        The resolved document, or a 308/307 redirect to its canonical slug

    Raises:
        HTTPException: 404 when nothing published matches
    """
    kind = _route_kind(locale, kind_path)
    result = await resolver.resolve_request(kind, locale, _raw_slug(request, slug))

    if isinstance(result, Redirect):
        return RedirectResponse(url=result.location, status_code=result.status_code)

    if not isinstance(result, ResolvedPage):
        raise _not_found()

    document = await store.load_document(result.view.document_id)
    if document is None:
        # Deleted between lookup and render
        raise _not_found()
    translations = await store.load_translations(document.id)
    alternates = resolver.absolute_alternates(document, translations)

    return DocumentResponse(
        view=result.view,
        canonical_slug=result.canonical_slug,
        canonical_path=resolver.alternates(document, translations)[locale],
        alternates=alternates,
    )
