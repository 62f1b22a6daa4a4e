"""
PromptShelf Backend — Editor Session Tests
===========================================

What:  Tests for EditorSession: edit vs view-auto mode, hand edits across
       form changes, reset and loading saved prompts.
"""

from app.constructor.editor import EditorSession
from app.constructor.fields import EMPTY_DOCUMENT_TEXT
from app.schemas.requirements import FormState

TA = "## Technical Architecture"


class TestEditorSession:

    def test_new_session_shows_placeholder(self):
        session = EditorSession()

        assert session.display == EMPTY_DOCUMENT_TEXT
        assert session.editing is True

    def test_first_form_change_replaces_placeholder(self):
        session = EditorSession()

        shown = session.update_form(FormState.from_choices(frontend_framework="React"))

        assert shown == f"{TA}\nFrontend Framework: React"
        assert session.last_generated == shown

    def test_hand_edits_survive_form_changes(self):
        session = EditorSession()
        session.update_form(
            FormState.from_choices(frontend_framework="React", backend_framework="FastAPI")
        )
        session.type_text(session.text + "\nDeploy via Vercel.")

        session.update_form(
            FormState.from_choices(frontend_framework="Vue", backend_framework="FastAPI")
        )
        assert session.display == (
            f"{TA}\nFrontend Framework: Vue\nBackend Framework: FastAPI\nDeploy via Vercel."
        )

        session.update_form(FormState.from_choices(backend_framework="FastAPI"))
        assert session.display == f"{TA}\nBackend Framework: FastAPI\nDeploy via Vercel."

    def test_view_mode_always_shows_generation(self):
        session = EditorSession(editing=False)
        session.update_form(FormState.from_choices(database="Redis"))

        assert session.display == f"{TA}\nDatabase: Redis"
        assert session.text == session.generated

    def test_leaving_edit_mode_discards_edits(self):
        session = EditorSession(FormState.from_choices(database="Redis"))
        session.type_text(session.text + "\nmy note")

        assert session.toggle_edit() is False
        assert session.display == f"{TA}\nDatabase: Redis"

        assert session.toggle_edit() is True
        assert "my note" not in session.display

    def test_typing_enters_edit_mode(self):
        session = EditorSession(editing=False)
        session.type_text("Hello")

        assert session.editing is True
        assert session.display == "Hello"

    def test_reset_restores_generation(self):
        session = EditorSession(FormState.from_choices(database="Redis"))
        session.type_text("scribbles")

        session.reset()

        assert session.display == f"{TA}\nDatabase: Redis"

    def test_loaded_prompt_keeps_its_lines(self):
        session = EditorSession()
        session.load_prompt(f"{TA}\nDatabase: MySQL\nUse read replicas.")

        session.update_form(FormState.from_choices(database="PostgreSQL"))

        assert session.display == f"{TA}\nDatabase: PostgreSQL\nUse read replicas."

    def test_loaded_prompt_survives_empty_form(self):
        session = EditorSession()
        content = "Write a haiku about migrations."
        session.load_prompt(content)

        session.update_form(FormState())

        assert session.display == content
