"""SQLAlchemy ORM models for documents and their translations."""

import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# Many-to-many: document -> category documents
document_category = Table(
    "document_category",
    Base.metadata,
    Column(
        "document_id",
        Uuid,
        ForeignKey("document.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("category_id", Uuid, primary_key=True),
)


class DocumentRow(Base):
    """Document table - base-locale content lives here."""

    __tablename__ = "document"
    __table_args__ = (
        UniqueConstraint("kind", "slug", name="uq_document_kind_slug"),
        Index("idx_document_feed", "kind", "status", "published_at", "id"),
    )
    # Fetch server defaults on flush; async sessions cannot lazy-load them later
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    kind: Mapped[str] = mapped_column(Text, nullable=False)
    base_locale: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(Text, nullable=False, default="published")
    author_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    translations: Mapped[list["TranslationRow"]] = relationship(
        "TranslationRow",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TranslationRow(Base):
    """Translation table - one row per (document, non-base locale)."""

    __tablename__ = "translation"
    __table_args__ = (
        UniqueConstraint("document_id", "locale", name="uq_translation_document_locale"),
        # Empty slugs are allowed on incomplete translations, so uniqueness is partial
        Index(
            "uq_translation_kind_locale_slug",
            "kind",
            "locale",
            "slug",
            unique=True,
            postgresql_where=text("slug <> ''"),
            sqlite_where=text("slug <> ''"),
        ),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("document.id", ondelete="CASCADE"), nullable=False
    )
    # Denormalized from document so slug lookups stay within one (kind, locale) namespace
    kind: Mapped[str] = mapped_column(Text, nullable=False)
    locale: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    slug: Mapped[str] = mapped_column(Text, nullable=False, default="")
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    meta_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    # Relationships
    document: Mapped["DocumentRow"] = relationship("DocumentRow", back_populates="translations")


class SlugHistoryRow(Base):
    """Retired slugs that still redirect to their document."""

    __tablename__ = "slug_history"
    __table_args__ = (
        UniqueConstraint("kind", "locale", "slug", name="uq_slug_history_kind_locale_slug"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("document.id", ondelete="CASCADE"), nullable=False
    )
    kind: Mapped[str] = mapped_column(Text, nullable=False)
    # Null for retired base slugs
    locale: Mapped[str | None] = mapped_column(Text, nullable=True)
    slug: Mapped[str] = mapped_column(Text, nullable=False)
    retired_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )
