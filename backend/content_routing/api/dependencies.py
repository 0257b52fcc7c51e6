"""FastAPI dependencies wiring stores and resolvers to a request."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.content_routing.db.engine import get_session
from backend.content_routing.db.repositories import TranslationStore
from backend.content_routing.db.sql_repositories import SqlContentStore
from backend.content_routing.feed.builder import FeedBuilder
from backend.content_routing.resolution.canonical import CanonicalResolver


def get_store(session: Annotated[AsyncSession, Depends(get_session)]) -> TranslationStore:
    """Content store bound to the request's session."""
    return SqlContentStore(session)


def get_resolver(store: Annotated[TranslationStore, Depends(get_store)]) -> CanonicalResolver:
    """Canonical resolver configured from Settings."""
    return CanonicalResolver.from_settings(store)


def get_feed_builder(store: Annotated[TranslationStore, Depends(get_store)]) -> FeedBuilder:
    """Feed builder configured from Settings."""
    return FeedBuilder.from_settings(store)
