"""Slug utility endpoints - GET /slugs/generate, GET /slugs/translate."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from backend.content_routing.api.dependencies import get_resolver
from backend.content_routing.config import get_settings
from backend.content_routing.models.common import DocumentKind
from backend.content_routing.resolution.canonical import CanonicalResolver
from backend.content_routing.resolution.paths import build_path
from backend.content_routing.slugs.generator import generate_slug

router = APIRouter(prefix="/slugs", tags=["slugs"])


class GenerateSlugResponse(BaseModel):
    """Response for GET /slugs/generate."""

    slug: str
    locale: str


class TranslateSlugResponse(BaseModel):
    """Response for GET /slugs/translate."""

    slug: str
    locale: str
    path: str


def _require_locale(locale: str) -> None:
    if not get_settings().is_locale(locale):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported locale: {locale}",
        )


@router.get("/generate", response_model=GenerateSlugResponse)
async def generate(
    text: Annotated[str, Query(max_length=500)],
    locale: str | None = None,
) -> GenerateSlugResponse:
    """Preview the slug a title would get in a locale (editor auto-fill).

    Args:
        text: Title to slugify
        locale: Target locale, Settings.default_locale when omitted
    """
    locale = locale or get_settings().default_locale
    _require_locale(locale)
    return GenerateSlugResponse(slug=generate_slug(text, locale), locale=locale)


@router.get("/translate", response_model=TranslateSlugResponse)
async def translate(
    kind: DocumentKind,
    slug: Annotated[str, Query(min_length=1)],
    from_locale: str,
    to_locale: str,
    resolver: Annotated[CanonicalResolver, Depends(get_resolver)],
) -> TranslateSlugResponse:
    """Map a slug seen in one locale to the canonical slug of another (locale switcher).

    Unknown slugs are returned unchanged.
    """
    _require_locale(from_locale)
    _require_locale(to_locale)

    translated = await resolver.translate_slug(kind, slug, from_locale, to_locale)
    return TranslateSlugResponse(
        slug=translated,
        locale=to_locale,
        path=build_path(to_locale, kind, translated, get_settings().kind_paths),
    )
