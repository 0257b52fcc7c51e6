"""Outcomes of resolving an inbound (locale, slug) request."""

from typing import Literal

from pydantic import BaseModel

from backend.content_routing.models.content import ResolvedView


class ResolvedPage(BaseModel):
    """Direct hit: render the view and emit canonical-link metadata."""

    outcome: Literal["resolved"] = "resolved"
    view: ResolvedView
    canonical_slug: str


class Redirect(BaseModel):
    """The requested slug is not canonical for the locale; the caller must redirect."""

    outcome: Literal["redirect"] = "redirect"
    canonical_slug: str
    location: str
    permanent: bool = True

    @property
    def status_code(self) -> int:
        return 308 if self.permanent else 307


class NotFound(BaseModel):
    """No published document matches the request."""

    outcome: Literal["not_found"] = "not_found"
    reason: str = "no_match"


ResolutionResult = ResolvedPage | Redirect | NotFound
