"""
PromptShelf Backend — Prompt Library Export
============================================

What:  Renders the prompt library as CSV for GET /api/prompts/export.csv.
How:   stdlib csv writer over an in-memory buffer; every field is quoted.
"""

import csv
import io
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from app.models.prompt import Prompt

CSV_HEADERS = ["Title", "Content", "Model", "Tokens", "Rating", "Note", "Tags", "Created At"]


def export_filename(today: Optional[date] = None) -> str:
    """``prompts-library-YYYY-MM-DD.csv`` for today's UTC date."""
    today = today or datetime.now(timezone.utc).date()
    return f"prompts-library-{today.isoformat()}.csv"


def prompts_to_csv(prompts: Iterable[Prompt]) -> str:
    """
    One row per prompt, in the order given.

    Missing model and note become empty strings, tags are joined with ", ",
    and created_at is written as ISO 8601.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for prompt in prompts:
        writer.writerow([
            prompt.title,
            prompt.content,
            prompt.model or "",
            prompt.token_count or 0,
            prompt.rating or 0,
            prompt.note or "",
            ", ".join(prompt.tags or []),
            prompt.created_at.isoformat() if prompt.created_at else "",
        ])
    return buffer.getvalue()
