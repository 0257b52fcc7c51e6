"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates:
- document, document_category
- translation (partial unique slug index per kind/locale)
- slug_history
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    # document table
    op.create_table(
        "document",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("base_locale", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False, server_default=""),
        sa.Column("excerpt", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", sa.Text(), nullable=False, server_default="published"),
        sa.Column("author_id", sa.Uuid(), nullable=True),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("kind", "slug", name="uq_document_kind_slug"),
    )
    op.create_index("idx_document_feed", "document", ["kind", "status", "published_at", "id"])

    # document_category table
    op.create_table(
        "document_category",
        sa.Column("document_id", sa.Uuid(), primary_key=True),
        sa.Column("category_id", sa.Uuid(), primary_key=True),
        sa.ForeignKeyConstraint(["document_id"], ["document.id"], ondelete="CASCADE"),
    )

    # translation table
    op.create_table(
        "translation",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("document_id", sa.Uuid(), nullable=False),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("locale", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False, server_default=""),
        sa.Column("slug", sa.Text(), nullable=False, server_default=""),
        sa.Column("body", sa.Text(), nullable=False, server_default=""),
        sa.Column("excerpt", sa.Text(), nullable=False, server_default=""),
        sa.Column("meta_title", sa.Text(), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["document_id"], ["document.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("document_id", "locale", name="uq_translation_document_locale"),
    )
    op.create_index(
        "uq_translation_kind_locale_slug",
        "translation",
        ["kind", "locale", "slug"],
        unique=True,
        postgresql_where=sa.text("slug <> ''"),
        sqlite_where=sa.text("slug <> ''"),
    )

    # slug_history table
    op.create_table(
        "slug_history",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("document_id", sa.Uuid(), nullable=False),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("locale", sa.Text(), nullable=True),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("retired_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["document_id"], ["document.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("kind", "locale", "slug", name="uq_slug_history_kind_locale_slug"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("slug_history")
    op.drop_index("uq_translation_kind_locale_slug", table_name="translation")
    op.drop_table("translation")
    op.drop_table("document_category")
    op.drop_index("idx_document_feed", table_name="document")
    op.drop_table("document")
