"""
PromptShelf Backend — Generator and Document Model Tests
=========================================================

What:  Tests for generate(), FieldSelection.values() and the Document parser.
"""

from app.constructor.document import Document, Line, Section, TextBlock, is_placeholder
from app.constructor.fields import EMPTY_DOCUMENT_TEXT, FieldKey
from app.constructor.generator import generate, generate_text
from app.schemas.requirements import FieldSelection, FormState


class TestGenerate:

    def test_empty_form_gives_placeholder(self):
        document = generate(FormState())

        assert document.is_placeholder
        assert document.render() == EMPTY_DOCUMENT_TEXT

    def test_lines_follow_field_order_not_form_order(self):
        form = FormState.from_choices(database="PostgreSQL", frontend_framework="React")

        assert generate_text(form) == (
            "## Technical Architecture\n"
            "Frontend Framework: React\n"
            "Database: PostgreSQL"
        )

    def test_choice_options_and_custom_options_are_joined(self):
        form = FormState(
            caching_strategy=FieldSelection(
                options=["CDN caching", "TTL-based expiration"],
                custom_options="Edge KV",
            ),
            api_testing=FieldSelection(choice="Postman", options=["Curl examples must be runnable."]),
        )

        text = generate_text(form)

        assert "Caching Strategy: CDN caching, TTL-based expiration, Edge KV" in text
        assert "API Testing: Postman, Curl examples must be runnable." in text

    def test_custom_value_used_only_without_choice(self):
        assert FieldSelection(custom="Qwik").values() == ["Qwik"]
        assert FieldSelection(choice="React", custom="Qwik").values() == ["React"]
        assert FieldSelection(choice="  ", options=[" ", ""]).values() == []

    def test_free_text_sections_follow_architecture(self):
        form = FormState.from_choices(backend_framework="FastAPI")
        form.acceptance_criteria = "  Given a prompt\n\nWhen I save it\n"
        form.product_requirements = "Prompt library"

        document = generate(form)

        assert [s.header for s in document.sections] == [
            "## Technical Architecture",
            "## Product Requirements",
            "## Acceptance Criteria",
        ]
        assert document.render().endswith(
            "## Acceptance Criteria\nGiven a prompt\n\nWhen I save it"
        )

    def test_free_text_only_form(self):
        form = FormState(additional_requirements="Dark mode")

        assert generate_text(form) == "## Additional Requirements\nDark mode"

    def test_generated_lines_are_classified(self):
        form = FormState.from_choices(api_contracts="GraphQL", docker_environment="")
        section = generate(form).sections[0]

        assert [line.key for line in section.lines] == [FieldKey.API_CONTRACTS]


class TestDocumentParse:

    def test_line_classification_is_exact(self):
        assert Line.parse("Database: MySQL").key is FieldKey.DATABASE
        assert Line.parse("Database Migrations: Flyway").key is FieldKey.DATABASE_MIGRATIONS
        assert Line.parse("  Observability : Grafana").key is FieldKey.OBSERVABILITY
        assert Line.parse("My Database: MySQL").key is None
        assert Line.parse("No colon here").key is None

    def test_only_architecture_lines_are_classified(self):
        document = Document.parse(
            "## Technical Architecture\nDatabase: MySQL\n\n## Business Rules\nDatabase: A"
        )
        architecture, rules = document.sections

        assert architecture.lines[0].key is FieldKey.DATABASE
        assert rules.lines[0].key is None

    def test_free_text_lines_are_generated_as_custom(self):
        form = FormState(business_rules="Database: A\nDatabase: B")
        section = generate(form).sections[0]

        assert [line.key for line in section.lines] == [None, None]

    def test_blank_lines_inside_section_do_not_split(self):
        text = "## A\none\n\ntwo\n\n## B\nthree"
        document = Document.parse(text)

        assert [s.header for s in document.sections] == ["## A", "## B"]
        assert [line.text for line in document.sections[0].lines] == ["one", "two"]
        assert document.render() == text

    def test_text_before_first_header_is_a_text_block(self):
        document = Document.parse("Intro\n\n## A\nx")

        assert isinstance(document.blocks[0], TextBlock)
        assert isinstance(document.blocks[1], Section)

    def test_sections_by_header_keeps_first(self):
        document = Document.parse("## A\nfirst\n\n## A\nsecond")

        assert document.sections_by_header()["## A"].lines[0].text == "first"

    def test_placeholder_detection(self):
        assert is_placeholder(None)
        assert is_placeholder("   ")
        assert is_placeholder(f"  {EMPTY_DOCUMENT_TEXT}\n")
        assert not is_placeholder("## A")
        assert Document.parse("").is_empty

    def test_rebuilt_section_renders_from_lines(self):
        section = Section.parse("## A\n\nx\ny")
        section.raw = None

        assert section.render() == "## A\nx\ny"
        assert Section("## Empty").render() == "## Empty"
