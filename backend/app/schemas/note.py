"""
PromptShelf Backend — Note Request/Response Schemas
====================================================

What:  Pydantic models for /api/notes.
How:   Every request field is optional with the board defaults: a blank
       title becomes "Untitled", a blank color "default", a blank folder
       NULL. PUT replaces the whole note using the same defaults.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _folder_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes and PUT /api/notes/{id}."""
    title: str = Field(default="Untitled", max_length=255)
    content: str = Field(default="")
    color: str = Field(default="default", max_length=20)
    is_pinned: bool = Field(default=False)
    folder: Optional[str] = Field(default=None, max_length=100)

    @field_validator("title")
    @classmethod
    def default_title(cls, v: str) -> str:
        return v.strip() or "Untitled"

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return v.strip()

    @field_validator("color")
    @classmethod
    def default_color(cls, v: str) -> str:
        return v.strip() or "default"

    @field_validator("folder")
    @classmethod
    def blank_folder(cls, v: Optional[str]) -> Optional[str]:
        return _folder_or_none(v)


NoteReplace = NoteCreate


class ColorUpdate(BaseModel):
    color: str = Field(default="default", max_length=20)

    @field_validator("color")
    @classmethod
    def default_color(cls, v: str) -> str:
        return v.strip() or "default"


class FolderUpdate(BaseModel):
    """Body of PATCH /api/notes/{id}/folder; blank or null removes the folder."""
    folder: Optional[str] = Field(default=None, max_length=100)

    @field_validator("folder")
    @classmethod
    def blank_folder(cls, v: Optional[str]) -> Optional[str]:
        return _folder_or_none(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    id: int
    title: str
    content: str
    color: str
    is_pinned: bool
    folder: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NoteDeleteResponse(BaseModel):
    message: str = Field(default="Note deleted successfully")
    note: NoteResponse
