"""
Requirements constructor — merge engine.

Folds a fresh generation into a document the user may have edited:

    merge_documents(displayed, generated, previous) -> str

``previous`` is the generation ``displayed`` was last synced with. Comparing
it against ``generated`` tells which form values went away (their lines are
stale and get removed) and which are current (their lines are upserted).
Everything the user typed that is not a generated line is kept verbatim.

The function never raises: any text parses into a Document.
"""

import logging
from typing import Dict, List, Optional

from app.constructor.document import Document, Line, Section, is_placeholder
from app.constructor.fields import EMPTY_DOCUMENT_TEXT, FieldKey

logger = logging.getLogger(__name__)


def _generation(text: str) -> Optional[Document]:
    """Parsed generation, or None when it is blank or the placeholder."""
    if is_placeholder(text):
        return None
    return Document.parse(text)


def _merge_section(
    section: Section,
    fresh: Optional[Section],
    previous: Optional[Section],
) -> Section:
    """
    Merges one displayed section with its counterparts in both generations.

    Returns ``section`` itself when nothing about it changes, so it renders
    from its original text.
    """
    fresh_keys = fresh.generated_keys if fresh else set()
    fresh_texts = fresh.custom_texts if fresh else set()
    stale_keys = (previous.generated_keys if previous else set()) - fresh_keys
    # Form-owned free text that the new generation no longer contains
    retired_texts = (previous.custom_texts if previous else set()) - fresh_texts

    table: Dict[FieldKey, Line] = {}
    custom: List[Line] = []
    dropped = 0
    for line in section.lines:
        if line.key is not None:
            if line.key in stale_keys:
                dropped += 1
                continue
            table[line.key] = line
        elif line.normalized in retired_texts:
            dropped += 1
        else:
            custom.append(line)

    if fresh is None:
        if not dropped:
            return section
    else:
        present = {line.normalized for line in custom}
        for line in fresh.lines:
            if line.key is not None:
                table[line.key] = line
            elif line.normalized not in present:
                custom.append(line)
                present.add(line.normalized)

    return Section(section.header, list(table.values()) + custom)


def merge_documents(displayed: str, generated: str, previous: str = "") -> str:
    """
    Merges a new generation into the displayed document.

    Args:
        displayed: Current editor text (possibly hand-edited)
        generated: Text just produced from the form
        previous:  Generation ``displayed`` was last synced with ("" if none)

    Returns:
        The merged document text. ``merge_documents(d, g, g) == d`` for any
        ``d`` and ``g``.
    """
    displayed = displayed or ""
    generated = generated or ""
    previous = previous or ""

    if generated == previous:
        return displayed

    new_doc = _generation(generated)
    prev_doc = _generation(previous)

    if new_doc is None:
        if prev_doc is None:
            return displayed
    elif is_placeholder(displayed):
        return generated

    current = Document.parse(displayed)
    new_sections = new_doc.sections_by_header() if new_doc else {}
    prev_sections = prev_doc.sections_by_header() if prev_doc else {}

    merged = Document()
    seen = set()
    for block in current.blocks:
        if not isinstance(block, Section):
            merged.blocks.append(block)
            continue
        if block.header in seen:
            # Repeated header: only the first copy is merged
            merged.blocks.append(block)
            continue
        seen.add(block.header)
        result = _merge_section(
            block, new_sections.get(block.header), prev_sections.get(block.header)
        )
        if result.lines or result is block:
            merged.blocks.append(result)
        else:
            logger.debug("Dropped emptied section %s", block.header)

    for header, section in new_sections.items():
        if header not in seen:
            merged.blocks.append(section)

    text = merged.render()
    if not text.strip():
        return EMPTY_DOCUMENT_TEXT
    return text
