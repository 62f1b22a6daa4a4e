"""
Requirements constructor — document generator.

Turns a FormState into a requirements document. Pure: same form, same text.
"""

from typing import List

from app.constructor.document import Document, Line, Section
from app.constructor.fields import TECHNICAL_ARCHITECTURE, FieldKey, FreeTextSection
from app.schemas.requirements import FormState


def generate(form: FormState) -> Document:
    """
    Builds the document for ``form``.

    One ``Label: v1, v2`` line per non-empty field group, in FieldKey order,
    under ``## Technical Architecture``; then one section per non-blank
    free-text field. Returns the placeholder document when nothing is set.
    """
    sections: List[Section] = []

    lines = []
    for key in FieldKey:
        values = form.selection(key).values()
        if values:
            lines.append(Line.generated(key, values))
    if lines:
        sections.append(Section(TECHNICAL_ARCHITECTURE, lines))

    for section in FreeTextSection:
        text = form.free_text(section).strip()
        if text:
            body = [Line(line) for line in text.split("\n") if line.strip()]
            # Keep the trimmed text as typed, inner blank lines included
            sections.append(Section(section.header, body, raw=f"{section.header}\n{text}"))

    if not sections:
        return Document.placeholder()
    return Document(list(sections))


def generate_text(form: FormState) -> str:
    return generate(form).render()
