"""
PromptShelf Backend — Note SQLAlchemy Model
============================================

What:  ORM model for the `notes` table: free-form scratch notes kept next
       to the prompt library.
Who:   Used by NoteService for CRUD and by Alembic for schema management.

Table Design:
    - color: one of the UI palette names (default, amber, emerald, sky,
      violet, rose); stored as a short string, not validated against the
      palette so new colors need no migration
    - folder: optional grouping; NULL means "no folder"
    - Composite index (is_pinned DESC, updated_at DESC) matches the list query
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.prompt import utc_now


class Note(Base):
    """
    A scratch note.

    Query Patterns:
        - Board listing: SELECT ... [WHERE folder = :folder]
          ORDER BY is_pinned DESC, updated_at DESC → idx_notes_pinned_updated
        - Folder list: SELECT DISTINCT folder ... ORDER BY folder
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(
        String(255), nullable=False, default="Untitled", server_default=text("'Untitled'"),
    )

    content: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=text("''"),
    )

    color: Mapped[str] = mapped_column(
        String(20), nullable=False, default="default", server_default=text("'default'"),
    )

    is_pinned: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false"),
    )

    folder: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

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
        Index("idx_notes_pinned_updated", is_pinned.desc(), updated_at.desc()),
        Index("idx_notes_folder", "folder"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', pinned={self.is_pinned})>"
