"""
Requirements constructor — field keys and section names.

Every auto-generated line in a requirements document belongs to exactly one
``FieldKey``. The enum order is the order lines are emitted in the
``## Technical Architecture`` section, and the label is the text in front of
the colon. Line classification is a lookup on that label, never a substring
search.
"""

from enum import Enum
from typing import Dict, Optional


TECHNICAL_ARCHITECTURE = "## Technical Architecture"

EMPTY_DOCUMENT_TEXT = "No requirements specified yet. Fill in the form to generate a prompt."


class FieldKey(str, Enum):
    """One selectable field group of the constructor form."""

    FRONTEND_FRAMEWORK = "frontend_framework"
    BACKEND_FRAMEWORK = "backend_framework"
    DATABASE = "database"
    DATABASE_MIGRATIONS = "database_migrations"
    MESSAGING = "messaging"
    CACHING_STRATEGY = "caching_strategy"
    API_GATEWAY = "api_gateway"
    API_CONTRACTS = "api_contracts"
    TESTING_FRAMEWORK = "testing_framework"
    API_TESTING = "api_testing"
    AI_FRAMEWORK = "ai_framework"
    VECTOR_DATABASE = "vector_database"
    AI_TESTING = "ai_testing"
    DOCKER_ENVIRONMENT = "docker_environment"
    OBSERVABILITY = "observability"
    SECURITY_DEFAULTS = "security_defaults"
    FAILURE_FIRST = "failure_first"
    TESTING_PHILOSOPHY = "testing_philosophy"
    MODEL_VALIDATION = "model_validation"

    @property
    def label(self) -> str:
        return FIELD_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> Optional["FieldKey"]:
        """Returns the key whose display label is exactly ``label``."""
        return _KEYS_BY_LABEL.get(label.strip())


FIELD_LABELS: Dict[FieldKey, str] = {
    FieldKey.FRONTEND_FRAMEWORK: "Frontend Framework",
    FieldKey.BACKEND_FRAMEWORK: "Backend Framework",
    FieldKey.DATABASE: "Database",
    FieldKey.DATABASE_MIGRATIONS: "Database Migrations",
    FieldKey.MESSAGING: "Messaging",
    FieldKey.CACHING_STRATEGY: "Caching Strategy",
    FieldKey.API_GATEWAY: "API Gateway",
    FieldKey.API_CONTRACTS: "API & Contracts",
    FieldKey.TESTING_FRAMEWORK: "Testing Framework",
    FieldKey.API_TESTING: "API Testing",
    FieldKey.AI_FRAMEWORK: "AI Framework",
    FieldKey.VECTOR_DATABASE: "Vector Database",
    FieldKey.AI_TESTING: "AI Testing",
    FieldKey.DOCKER_ENVIRONMENT: "Docker and Environment",
    FieldKey.OBSERVABILITY: "Observability",
    FieldKey.SECURITY_DEFAULTS: "Security Defaults",
    FieldKey.FAILURE_FIRST: "Failure First Thinking",
    FieldKey.TESTING_PHILOSOPHY: "Testing Philosophy",
    FieldKey.MODEL_VALIDATION: "Model Validation",
}

_KEYS_BY_LABEL: Dict[str, FieldKey] = {label: key for key, label in FIELD_LABELS.items()}


class FreeTextSection(str, Enum):
    """Free-text form fields; each becomes its own section when non-blank."""

    PRODUCT_REQUIREMENTS = "product_requirements"
    ACCEPTANCE_CRITERIA = "acceptance_criteria"
    USER_STORIES = "user_stories"
    BUSINESS_RULES = "business_rules"
    NON_FUNCTIONAL_REQUIREMENTS = "non_functional_requirements"
    ADDITIONAL_REQUIREMENTS = "additional_requirements"

    @property
    def header(self) -> str:
        return FREE_TEXT_HEADERS[self]


FREE_TEXT_HEADERS: Dict[FreeTextSection, str] = {
    FreeTextSection.PRODUCT_REQUIREMENTS: "## Product Requirements",
    FreeTextSection.ACCEPTANCE_CRITERIA: "## Acceptance Criteria",
    FreeTextSection.USER_STORIES: "## User Stories",
    FreeTextSection.BUSINESS_RULES: "## Business Rules",
    FreeTextSection.NON_FUNCTIONAL_REQUIREMENTS: "## Non-Functional Requirements",
    FreeTextSection.ADDITIONAL_REQUIREMENTS: "## Additional Requirements",
}
