"""Feed listing models."""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, field_validator

from backend.content_routing.models.content import ResolvedView


class FeedFilters(BaseModel):
    """Conjunctive listing filters.

    date_from/date_to bound published_at inclusively.
    """

    category_id: UUID | None = None
    author_id: UUID | None = None
    search: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None

    @field_validator("date_from", "date_to")
    @classmethod
    def normalize_to_naive_utc(cls, v: datetime | None) -> datetime | None:
        """Stored timestamps are naive UTC; convert aware bounds to match."""
        if v is None or v.tzinfo is None:
            return v
        return v.astimezone(timezone.utc).replace(tzinfo=None)

    def signature_parts(self) -> list[str]:
        """Stable textual form used to bind cursors to a filter set."""
        return [
            f"category={self.category_id or ''}",
            f"author={self.author_id or ''}",
            f"search={(self.search or '').strip().lower()}",
            f"from={self.date_from.isoformat() if self.date_from else ''}",
            f"to={self.date_to.isoformat() if self.date_to else ''}",
        ]


class FeedPage(BaseModel):
    """One page of a feed."""

    items: list[ResolvedView]
    next_cursor: str | None = None
    has_more: bool
