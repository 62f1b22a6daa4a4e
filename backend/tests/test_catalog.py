"""
PromptShelf Backend — Option Catalog Tests
===========================================

What:  Tests for filtered_options / compatible_values: which choices the
       constructor offers once a backend framework is picked.
"""

from app.constructor.catalog import (
    CACHING_STRATEGIES,
    DATABASES,
    FRONTEND_FRAMEWORKS,
    compatible_values,
    filtered_options,
)
from app.constructor.fields import FieldKey


class TestFilteredOptions:

    def test_every_field_group_is_present(self):
        catalogs = filtered_options()

        assert set(catalogs) == {key.value for key in FieldKey}

    def test_no_backend_offers_full_catalog(self):
        catalogs = filtered_options(None)

        assert catalogs["database"]["choices"] == DATABASES
        assert catalogs["caching_strategy"]["options"] == CACHING_STRATEGIES

    def test_fastapi_narrows_testing_frameworks(self):
        catalogs = filtered_options("FastAPI")

        assert catalogs["testing_framework"]["choices"] == ["Pytest", "Jest", "Vitest"]
        assert catalogs["database_migrations"]["choices"] == [
            "Alembic (Python)", "Flyway", "Liquibase",
        ]

    def test_narrowing_keeps_catalog_order_and_drops_unknown_values(self):
        # Django lists Oracle, which is not in the database catalog
        assert filtered_options("Django")["database"]["choices"] == [
            "PostgreSQL", "MySQL", "SQLite", "MariaDB",
        ]

    def test_caching_is_narrowed_through_options(self):
        catalogs = filtered_options("Flask")

        assert catalogs["caching_strategy"]["choices"] == []
        assert "Write-behind caching" not in catalogs["caching_strategy"]["options"]
        assert "Write-through caching" in catalogs["caching_strategy"]["options"]

    def test_unlisted_groups_are_untouched(self):
        catalogs = filtered_options("NestJS")

        assert catalogs["frontend_framework"]["choices"] == FRONTEND_FRAMEWORKS
        assert catalogs["security_defaults"]["options"]

    def test_unknown_backend_offers_full_catalog(self):
        assert filtered_options("Koa")["database"]["choices"] == DATABASES
        assert compatible_values("Koa", FieldKey.DATABASE) is None
        assert compatible_values("", FieldKey.DATABASE) is None

    def test_backend_name_is_trimmed(self):
        assert compatible_values("  Spring Boot ", FieldKey.DATABASE_MIGRATIONS) == [
            "Flyway", "Liquibase",
        ]
