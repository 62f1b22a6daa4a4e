"""
PromptShelf Backend — CSV Export Tests
=======================================
"""

import csv
import io
from datetime import date

from app.services.export_service import CSV_HEADERS, export_filename, prompts_to_csv


class TestExport:

    def test_filename_uses_date(self):
        assert export_filename(date(2026, 3, 9)) == "prompts-library-2026-03-09.csv"

    def test_header_row_is_quoted(self):
        text = prompts_to_csv([])

        assert text == '"Title","Content","Model","Tokens","Rating","Note","Tags","Created At"\n'

    def test_rows_round_trip_through_csv_reader(self, make_prompt):
        prompts = [
            make_prompt(content='Say "hi",\nthen stop', tags=["a", "b"], note="n"),
            make_prompt(id=2, model=None, tags=[], rating=0),
        ]

        rows = list(csv.reader(io.StringIO(prompts_to_csv(prompts))))

        assert rows[0] == CSV_HEADERS
        assert rows[1] == [
            "Code reviewer", 'Say "hi",\nthen stop', "gpt-4o", "12", "4", "n", "a, b",
            "2026-01-15T12:00:00+00:00",
        ]
        assert rows[2][2] == ""
        assert rows[2][4] == "0"
        assert rows[2][6] == ""

    def test_numbers_are_not_quoted(self, make_prompt):
        line = prompts_to_csv([make_prompt()]).splitlines()[1]

        assert ',12,4,' in line
