"""Backfill missing translation slugs for one or all document kinds.

Usage:
    python -m scripts.backfill_slugs [kind ...]
"""

import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from backend.content_routing.db.engine import get_async_engine
from backend.content_routing.db.sql_repositories import SqlContentStore
from backend.content_routing.models import DocumentKind
from backend.content_routing.slugs.backfill import backfill_all


async def main(kind_names: list[str]) -> None:
    """Run the backfill for the given kinds (all kinds when empty)."""
    kinds = [DocumentKind(name) for name in kind_names] or list(DocumentKind)

    async with AsyncSession(get_async_engine(), expire_on_commit=False) as session:
        store = SqlContentStore(session)
        for kind in kinds:
            written = await backfill_all(store, kind)
            print(f"{kind.value}: {written} slug(s) written")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
