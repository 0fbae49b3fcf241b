"""Create page, comment and form session tables

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create pages, page_comments, form_sessions and form_session_entries."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    op.create_table(
        "pages",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("uuid_generate_v4()"),
        ),
        sa.Column("url_segment", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("idx_pages_url_segment", "pages", ["url_segment"], unique=True)

    op.create_table(
        "page_comments",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("uuid_generate_v4()"),
        ),
        sa.Column(
            "page_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("pages.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_page_comments_page", "page_comments", ["page_id"])
    op.create_index("idx_page_comments_created", "page_comments", ["created_at"])
    # Duplicate-comment lookups match full bodies with `=`
    op.create_index(
        "idx_page_comments_comment_hash",
        "page_comments",
        ["comment"],
        postgresql_using="hash",
    )

    op.create_table(
        "form_sessions",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("uuid_generate_v4()"),
        ),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_form_sessions_token", "form_sessions", ["token"], unique=True)
    op.create_index("idx_form_sessions_expires", "form_sessions", ["expires_at"])

    op.create_table(
        "form_session_entries",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("uuid_generate_v4()"),
        ),
        sa.Column(
            "session_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("form_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("key", sa.String(length=255), nullable=False),
        sa.Column("value", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("session_id", "key", name="uq_form_session_entries_session_key"),
    )
    op.create_index("idx_form_session_entries_session", "form_session_entries", ["session_id"])


def downgrade() -> None:
    """Drop form session, comment and page tables."""
    op.drop_index("idx_form_session_entries_session", table_name="form_session_entries")
    op.drop_table("form_session_entries")
    op.drop_index("idx_form_sessions_expires", table_name="form_sessions")
    op.drop_index("idx_form_sessions_token", table_name="form_sessions")
    op.drop_table("form_sessions")
    op.drop_index("idx_page_comments_comment_hash", table_name="page_comments")
    op.drop_index("idx_page_comments_created", table_name="page_comments")
    op.drop_index("idx_page_comments_page", table_name="page_comments")
    op.drop_table("page_comments")
    op.drop_index("idx_pages_url_segment", table_name="pages")
    op.drop_table("pages")
