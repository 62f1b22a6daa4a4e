"""
Requirements constructor — structured document model.

A requirements document is an ordered list of blocks joined by one blank
line. A block is either a ``Section`` (a ``## Header`` line followed by
lines) or a ``TextBlock`` holding free text that does not start with a
header. Blocks are split on a blank line immediately followed by ``## ``,
so blank lines inside a section body do not start a new block.

The merge engine works on these types and only turns them back into text at
the edge. Blocks that come out of a merge untouched render from their
original text, byte for byte.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union

from app.constructor.fields import EMPTY_DOCUMENT_TEXT, TECHNICAL_ARCHITECTURE, FieldKey

BLOCK_SEPARATOR = "\n\n"
_BLOCK_SPLIT = re.compile(r"\n\n(?=## )")


def is_placeholder(text: Optional[str]) -> bool:
    """True for blank text and for the 'nothing selected yet' sentinel."""
    if text is None:
        return True
    stripped = text.strip()
    return not stripped or stripped == EMPTY_DOCUMENT_TEXT


@dataclass(frozen=True)
class Line:
    """
    One line of a section body.

    ``key`` is set when the text before the first colon is exactly the label
    of a known field and the line sits under ``## Technical Architecture``;
    such lines are owned by the form. Everything else is custom text.
    """

    text: str
    key: Optional[FieldKey] = None

    @classmethod
    def parse(cls, text: str) -> "Line":
        if ":" not in text:
            return cls(text)
        label = text.split(":", 1)[0]
        return cls(text, FieldKey.from_label(label))

    @classmethod
    def generated(cls, key: FieldKey, values: List[str]) -> "Line":
        return cls(f"{key.label}: {', '.join(values)}", key)

    @property
    def normalized(self) -> str:
        return self.text.strip()


@dataclass
class Section:
    header: str
    lines: List[Line] = field(default_factory=list)
    # Original block text; cleared whenever the section is rebuilt
    raw: Optional[str] = None

    @classmethod
    def parse(cls, block: str) -> "Section":
        first, _, body = block.partition("\n")
        header = first.strip()
        # Form fields only ever render under the architecture header
        classify = Line.parse if header == TECHNICAL_ARCHITECTURE else Line
        lines = [classify(text) for text in body.split("\n") if text.strip()]
        return cls(header=header, lines=lines, raw=block)

    @property
    def generated_keys(self) -> Set[FieldKey]:
        return {line.key for line in self.lines if line.key is not None}

    @property
    def custom_texts(self) -> Set[str]:
        return {line.normalized for line in self.lines if line.key is None}

    def render(self) -> str:
        if self.raw is not None:
            return self.raw
        if not self.lines:
            return self.header
        return self.header + "\n" + "\n".join(line.text for line in self.lines)


@dataclass
class TextBlock:
    """Free text outside any section (e.g. an intro typed above the first header)."""

    text: str

    def render(self) -> str:
        return self.text


Block = Union[Section, TextBlock]


@dataclass
class Document:
    blocks: List[Block] = field(default_factory=list)

    @classmethod
    def parse(cls, text: Optional[str]) -> "Document":
        """Parses document text. Never raises; blank input gives an empty document."""
        if not text or not text.strip():
            return cls()
        blocks: List[Block] = []
        for chunk in _BLOCK_SPLIT.split(text):
            if chunk.lstrip().startswith("##"):
                blocks.append(Section.parse(chunk))
            elif chunk.strip():
                blocks.append(TextBlock(chunk))
        return cls(blocks)

    @classmethod
    def placeholder(cls) -> "Document":
        return cls([TextBlock(EMPTY_DOCUMENT_TEXT)])

    @property
    def sections(self) -> List[Section]:
        return [block for block in self.blocks if isinstance(block, Section)]

    def sections_by_header(self) -> Dict[str, Section]:
        """First section for every header; later duplicates are ignored."""
        by_header: Dict[str, Section] = {}
        for section in self.sections:
            by_header.setdefault(section.header, section)
        return by_header

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    @property
    def is_placeholder(self) -> bool:
        return is_placeholder(self.render())

    def render(self) -> str:
        return BLOCK_SEPARATOR.join(block.render() for block in self.blocks)

    def __str__(self) -> str:
        return self.render()
