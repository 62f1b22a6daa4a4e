"""
PromptShelf Backend — Prompt SQLAlchemy Model
==============================================

What:  ORM model for the `prompts` table: the saved prompt library.
Who:   Used by PromptService for CRUD and by Alembic for schema management.

Table Design:
    - Integer primary key (SERIAL); ids are sequential and shown in URLs
    - tags: PostgreSQL TEXT[] so a prompt's tags travel with its row
    - rating: 0 means "not rated"; 1-5 stars otherwise
    - updated_at is set by the service on every write
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import CheckConstraint, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Prompt(Base):
    """
    A saved prompt.

    Query Patterns:
        - Library listing: SELECT ... ORDER BY created_at DESC
          → idx_prompts_created_at
        - Single prompt: SELECT ... WHERE id = :id (primary key)
    """

    __tablename__ = "prompts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Model the prompt was written for (e.g. "gpt-4o"); free text
    model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    token_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )

    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="0 = unrated, 1-5 stars",
    )

    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    tags: Mapped[List[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_prompts_created_at", created_at.desc()),
        CheckConstraint("rating BETWEEN 0 AND 5", name="ck_prompts_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Prompt(id={self.id}, title='{self.title}', rating={self.rating})>"
