"""Create prompts and notes tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the prompt library table and the scratch notes table.
How:   SERIAL integer keys, TIMESTAMP WITH TIME ZONE, and a TEXT[] column
       for prompt tags.

Rollback: downgrade() drops both tables (all data is lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Columns mirror app/models/prompt.py and app/models/note.py."""
    op.create_table(
        "prompts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "model",
            sa.String(100),
            nullable=True,
            comment="Model the prompt was written for",
        ),
        sa.Column("token_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "rating",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="0 = unrated, 1-5 stars",
        ),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'"),
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("rating BETWEEN 0 AND 5", name="ck_prompts_rating_range"),
    )

    # Library listing is newest first
    op.create_index(
        "idx_prompts_created_at",
        "prompts",
        [sa.text("created_at DESC")],
    )

    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "title",
            sa.String(255),
            nullable=False,
            server_default=sa.text("'Untitled'"),
        ),
        sa.Column("content", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "color",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'default'"),
        ),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("folder", sa.String(100), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Pinned notes first, then most recently edited
    op.create_index(
        "idx_notes_pinned_updated",
        "notes",
        [sa.text("is_pinned DESC"), sa.text("updated_at DESC")],
    )
    op.create_index("idx_notes_folder", "notes", ["folder"])


def downgrade() -> None:
    op.drop_index("idx_notes_folder", table_name="notes")
    op.drop_index("idx_notes_pinned_updated", table_name="notes")
    op.drop_table("notes")
    op.drop_index("idx_prompts_created_at", table_name="prompts")
    op.drop_table("prompts")
