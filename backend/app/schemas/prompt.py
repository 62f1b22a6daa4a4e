"""
PromptShelf Backend — Prompt Request/Response Schemas
======================================================

What:  Pydantic models for /api/prompts.
How:   Request models trim and validate input (title and content required,
       rating 0-5, non-empty tags); response models serialize ORM rows via
       ``from_attributes``.

Blank optional strings (model, note) are stored as NULL, matching what the
library UI sends when a field is cleared.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _required_text(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean_tags(tags: List[str]) -> List[str]:
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if not tag:
            raise ValueError("Each tag must be a non-empty string")
        cleaned.append(tag)
    return cleaned


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PromptCreate(BaseModel):
    """
    Body of POST /api/prompts and PUT /api/prompts/{id}.

    PUT replaces the whole row: omitted optional fields fall back to these
    defaults rather than keeping their stored values.
    """
    title: str = Field(max_length=255, description="Prompt title (1-255 chars)")
    content: str = Field(description="Prompt text")
    model: Optional[str] = Field(default=None, max_length=100)
    token_count: int = Field(default=0, ge=0)
    rating: int = Field(default=0, ge=0, le=5, description="0 = unrated, 1-5 stars")
    note: Optional[str] = Field(default=None)
    tags: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _required_text(v, "Title")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _required_text(v, "Content")

    @field_validator("model", "note")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v)


PromptUpdate = PromptCreate


class RatingUpdate(BaseModel):
    rating: int = Field(ge=0, le=5, description="0 = unrated, 1-5 stars")


class NoteUpdate(BaseModel):
    """Body of PATCH /api/prompts/{id}/note; blank clears the note."""
    note: Optional[str] = Field(default=None)

    @field_validator("note")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class TagsUpdate(BaseModel):
    tags: List[str]

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v)


class RefineRequest(BaseModel):
    prompt: str = Field(description="Prompt text to refine", max_length=50000)


class AnalyzeRequest(BaseModel):
    """
    Body of POST /api/prompts/analyze.

    ``token_count`` overrides the built-in estimate when the client already
    counted tokens for a specific model.
    """
    content: str = Field(default="", max_length=200000)
    token_count: Optional[int] = Field(default=None, ge=0)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PromptResponse(BaseModel):
    id: int
    title: str
    content: str
    model: Optional[str] = None
    token_count: int = 0
    rating: int = 0
    note: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PromptDeleteResponse(BaseModel):
    message: str = Field(default="Prompt deleted successfully")
    prompt: PromptResponse


class RefineResponse(BaseModel):
    refined_prompt: str


class ConfidenceFactor(BaseModel):
    """One scored dimension of the confidence report."""
    name: str
    points: int
    max: int
    detail: str
    is_bonus: bool = False


class ConfidenceReport(BaseModel):
    """
    Heuristic quality score for a prompt.

    Levels: high (>= 70), good (>= 45), medium (>= 25), low, and none for
    blank content.
    """
    level: str
    score: int = Field(ge=0, description="Additive score; the EmotionPrompt bonus can push it past 100")
    label: str
    factors: List[ConfidenceFactor] = Field(default_factory=list)
    has_emotion: bool = False
    emotion_score: int = 0


class AnalyzeResponse(BaseModel):
    token_count: int = Field(description="Token count used for scoring")
    estimated_tokens: int = Field(description="ceil(characters / 4)")
    confidence: ConfidenceReport
