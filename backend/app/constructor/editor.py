"""
Requirements constructor — editing surface.

EditorSession is the server-side model of the constructor's output pane.
It tracks the form, the text the user sees, and the generation that text
was last synced with, and applies the merge engine on every form change
while the user is editing.
"""

import logging
from typing import Optional

from app.constructor.generator import generate_text
from app.constructor.merge import merge_documents
from app.schemas.requirements import FormState

logger = logging.getLogger(__name__)


class EditorSession:
    """
    State of one constructor editing session.

    Attributes:
        form:           Current form values
        generated:      Raw generation of ``form``
        text:           Editor text (hand edits included)
        last_generated: Generation ``text`` was last synced with; empty after
                        loading a saved prompt so nothing counts as stale
        editing:        True in edit mode, False in view-auto mode

    Example:
        session = EditorSession()
        session.update_form(FormState.from_choices(frontend_framework="React"))
        session.type_text(session.text + "\\nDeploy via Vercel.")
        session.update_form(FormState.from_choices(frontend_framework="Vue"))
        # session.display keeps "Deploy via Vercel." and now says Vue
    """

    def __init__(self, form: Optional[FormState] = None, editing: bool = True):
        self.form = form or FormState()
        self.generated = generate_text(self.form)
        self.text = self.generated
        self.last_generated = self.generated
        self.editing = editing

    @property
    def display(self) -> str:
        """What the output pane shows."""
        if self.editing and self.text:
            return self.text
        return self.generated

    def update_form(self, form: FormState) -> str:
        """Applies new form values and returns the updated display text."""
        self.form = form
        generated = generate_text(form)
        self.generated = generated
        if self.editing:
            self.text = merge_documents(self.text, generated, self.last_generated)
        else:
            self.text = generated
        self.last_generated = generated
        return self.display

    def type_text(self, text: str) -> None:
        """Replaces the editor text with what the user typed."""
        self.text = text
        self.editing = True

    def toggle_edit(self) -> bool:
        """
        Switches between edit mode and view-auto mode.

        Leaving edit mode discards hand edits: the text is re-synced with the
        current generation. Returns the new ``editing`` flag.
        """
        if self.editing:
            self.text = self.generated
            self.last_generated = self.generated
        self.editing = not self.editing
        return self.editing

    def reset(self) -> None:
        """Throws away hand edits and shows the current generation."""
        self.text = self.generated
        self.last_generated = self.generated

    def load_prompt(self, content: str) -> None:
        """Loads a saved prompt's content for editing."""
        logger.debug("Loading saved prompt into editor (%d chars)", len(content))
        self.text = content
        self.last_generated = ""
        self.editing = True
