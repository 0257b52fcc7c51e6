"""Opaque feed cursors.

A cursor carries the keyset position of the last row served plus a hash of
the (kind, filters) it was issued for, serialized as URL-safe base64 JSON.
"""

import base64
import binascii
import hashlib
import json
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ValidationError

from backend.content_routing.db.repositories import FeedPosition
from backend.content_routing.models.common import DocumentKind
from backend.content_routing.models.feed import FeedFilters


class InvalidCursorError(ValueError):
    """Cursor is malformed or was issued for a different kind/filter set."""


def filter_signature(kind: DocumentKind, filters: FeedFilters) -> str:
    """Deterministic hash binding a cursor to its listing."""
    data = {"kind": kind.value, "filters": filters.signature_parts()}
    sorted_json = json.dumps(data, sort_keys=True)
    return hashlib.sha256(sorted_json.encode()).hexdigest()[:16]


class FeedCursor(BaseModel):
    """Last (published_at, id) served, tied to a filter signature."""

    published_at: datetime
    document_id: UUID
    signature: str

    @property
    def position(self) -> FeedPosition:
        return FeedPosition(published_at=self.published_at, document_id=self.document_id)

    def encode(self) -> str:
        """Serialize to an opaque URL-safe token."""
        payload = json.dumps(
            {
                "at": self.published_at.isoformat(),
                "id": str(self.document_id),
                "sig": self.signature,
            },
            sort_keys=True,
            separators=(",", ":"),
        )
        return base64.urlsafe_b64encode(payload.encode()).decode().rstrip("=")

    @classmethod
    def decode(cls, token: str) -> "FeedCursor":
        """Parse an opaque token.

        Raises:
            InvalidCursorError: If the token cannot be parsed
        """
        padded = token + "=" * (-len(token) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            data = json.loads(raw)
            return cls(
                published_at=data["at"],
                document_id=data["id"],
                signature=data["sig"],
            )
        except (
            binascii.Error,
            UnicodeError,
            json.JSONDecodeError,
            KeyError,
            TypeError,
            ValidationError,
        ) as e:
            raise InvalidCursorError("Malformed cursor") from e

    def check(self, kind: DocumentKind, filters: FeedFilters) -> None:
        """Reject a cursor reused with another kind or filter set.

        Raises:
            InvalidCursorError: If the signature does not match
        """
        if self.signature != filter_signature(kind, filters):
            raise InvalidCursorError("Cursor does not match the current filters")
