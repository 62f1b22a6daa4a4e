"""
PromptShelf Backend — Requirements Constructor Schemas
=======================================================

What:  Request/response models for /api/requirements.
How:   ``FormState`` mirrors the constructor form: one ``FieldSelection`` per
       field group plus the free-text sections. The generator reads it
       directly, so the same model serves the HTTP layer and in-process
       callers such as EditorSession.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.constructor.fields import FieldKey, FreeTextSection


class FieldSelection(BaseModel):
    """
    What the user picked for one field group.

    ``custom`` only counts when no ``choice`` is picked; ``options`` keeps
    pick order; ``custom_options`` is appended after the picked options.
    """
    choice: str = Field(default="", max_length=500)
    custom: str = Field(default="", max_length=2000)
    options: List[str] = Field(default_factory=list)
    custom_options: str = Field(default="", max_length=2000)

    def values(self) -> List[str]:
        """Values to render for this group, in output order; blanks are skipped."""
        values: List[str] = []
        primary = self.choice.strip() or self.custom.strip()
        if primary:
            values.append(primary)
        values.extend(option.strip() for option in self.options if option.strip())
        if self.custom_options.strip():
            values.append(self.custom_options.strip())
        return values


class FormState(BaseModel):
    """Complete constructor form. Every field is optional; an empty form is valid."""

    # ── Technical architecture groups ─────────────────────────────────────
    frontend_framework: FieldSelection = Field(default_factory=FieldSelection)
    backend_framework: FieldSelection = Field(default_factory=FieldSelection)
    database: FieldSelection = Field(default_factory=FieldSelection)
    database_migrations: FieldSelection = Field(default_factory=FieldSelection)
    messaging: FieldSelection = Field(default_factory=FieldSelection)
    caching_strategy: FieldSelection = Field(default_factory=FieldSelection)
    api_gateway: FieldSelection = Field(default_factory=FieldSelection)
    api_contracts: FieldSelection = Field(default_factory=FieldSelection)
    testing_framework: FieldSelection = Field(default_factory=FieldSelection)
    api_testing: FieldSelection = Field(default_factory=FieldSelection)
    ai_framework: FieldSelection = Field(default_factory=FieldSelection)
    vector_database: FieldSelection = Field(default_factory=FieldSelection)
    ai_testing: FieldSelection = Field(default_factory=FieldSelection)
    docker_environment: FieldSelection = Field(default_factory=FieldSelection)
    observability: FieldSelection = Field(default_factory=FieldSelection)
    security_defaults: FieldSelection = Field(default_factory=FieldSelection)
    failure_first: FieldSelection = Field(default_factory=FieldSelection)
    testing_philosophy: FieldSelection = Field(default_factory=FieldSelection)
    model_validation: FieldSelection = Field(default_factory=FieldSelection)

    # ── Free-text sections ────────────────────────────────────────────────
    product_requirements: str = Field(default="", max_length=20000)
    acceptance_criteria: str = Field(default="", max_length=20000)
    user_stories: str = Field(default="", max_length=20000)
    business_rules: str = Field(default="", max_length=20000)
    non_functional_requirements: str = Field(default="", max_length=20000)
    additional_requirements: str = Field(default="", max_length=20000)

    def selection(self, key: FieldKey) -> FieldSelection:
        return getattr(self, key.value)

    def free_text(self, section: FreeTextSection) -> str:
        return getattr(self, section.value)

    @classmethod
    def from_choices(cls, **choices: str) -> "FormState":
        """
        Shorthand for forms that only pick single values.

        Example:
            FormState.from_choices(frontend_framework="React", backend_framework="FastAPI")
        """
        return cls(**{name: FieldSelection(choice=value) for name, value in choices.items()})


class GenerateResponse(BaseModel):
    """Returned by POST /api/requirements/generate."""
    document: str = Field(description="Generated requirements document text")
    is_empty: bool = Field(description="True when nothing was selected (sentinel document)")


class MergeRequest(BaseModel):
    """
    Body of POST /api/requirements/merge.

    ``previous`` is the generation the displayed text was last synced with;
    send an empty string for a document loaded from a saved prompt.
    """
    displayed: str = Field(default="", max_length=200000)
    generated: str = Field(default="", max_length=200000)
    previous: str = Field(default="", max_length=200000)


class MergeResponse(BaseModel):
    document: str = Field(description="Merged document text")


class FieldCatalog(BaseModel):
    choices: List[str] = Field(default_factory=list)
    options: List[str] = Field(default_factory=list)


class OptionsResponse(BaseModel):
    """Option catalogs per field group, narrowed by backend framework when known."""
    backend_framework: Optional[str] = Field(default=None)
    fields: Dict[str, FieldCatalog] = Field(description="Catalog keyed by field group")
