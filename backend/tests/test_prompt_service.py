"""
PromptShelf Backend — Prompt Service Unit Tests
================================================

What:  Tests for PromptService CRUD and partial updates.
How:   Mock AsyncSession; rows are real Prompt instances so response
       serialization runs exactly as in production.
"""

import pytest
from unittest.mock import AsyncMock

from app.exceptions import DatabaseError, NotFoundError
from app.schemas.prompt import PromptCreate
from app.services.prompt_service import PromptService

from helpers import result_with, result_with_rows


class TestPromptServiceRead:

    def setup_method(self):
        self.service = PromptService()

    @pytest.mark.asyncio
    async def test_list_prompts_serializes_rows(self, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with_rows(
            [make_prompt(id=2, title="Newer"), make_prompt(id=1)]
        )

        result = await self.service.list_prompts(mock_db_session)

        assert [p.id for p in result] == [2, 1]
        assert result[0].title == "Newer"
        assert result[1].tags == ["review"]

    @pytest.mark.asyncio
    async def test_list_prompts_wraps_driver_errors(self, mock_db_session):
        mock_db_session.execute.side_effect = ConnectionError("db gone")

        with pytest.raises(DatabaseError):
            await self.service.list_prompts(mock_db_session)

    @pytest.mark.asyncio
    async def test_get_prompt_found(self, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with(make_prompt(id=7, rating=5))

        result = await self.service.get_prompt(mock_db_session, 7)

        assert result.id == 7
        assert result.rating == 5

    @pytest.mark.asyncio
    async def test_get_prompt_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        with pytest.raises(NotFoundError):
            await self.service.get_prompt(mock_db_session, 99)


class TestPromptServiceWrite:

    def setup_method(self):
        self.service = PromptService()

    @pytest.mark.asyncio
    async def test_create_prompt_flushes_and_returns_id(self, mock_db_session):
        def assign_id():
            added = mock_db_session.add.call_args.args[0]
            added.id = 42

        mock_db_session.flush = AsyncMock(side_effect=assign_id)
        data = PromptCreate(title="  Summarizer ", content="Summarize the text", tags=["tldr"])

        result = await self.service.create_prompt(mock_db_session, data)

        assert result.id == 42
        assert result.title == "Summarizer"
        assert result.rating == 0
        assert result.created_at == result.updated_at
        mock_db_session.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_update_prompt_replaces_fields(self, mock_db_session, make_prompt):
        row = make_prompt(note="old note")
        mock_db_session.execute.return_value = result_with(row)
        data = PromptCreate(title="Renamed", content="New body")

        result = await self.service.update_prompt(mock_db_session, 1, data)

        assert result.title == "Renamed"
        assert result.note is None
        assert result.tags == []
        assert row.updated_at > row.created_at
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_missing_prompt_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        with pytest.raises(NotFoundError):
            await self.service.update_prompt(
                mock_db_session, 5, PromptCreate(title="t", content="c"),
            )

    @pytest.mark.asyncio
    async def test_update_rating_only_touches_rating(self, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with(make_prompt(rating=1))

        result = await self.service.update_rating(mock_db_session, 1, 5)

        assert result.rating == 5
        assert result.title == "Code reviewer"

    @pytest.mark.asyncio
    async def test_update_tags(self, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with(make_prompt())

        result = await self.service.update_tags(mock_db_session, 1, ["a", "b"])

        assert result.tags == ["a", "b"]

    @pytest.mark.asyncio
    async def test_update_note_can_clear(self, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with(make_prompt(note="keep?"))

        result = await self.service.update_note(mock_db_session, 1, None)

        assert result.note is None

    @pytest.mark.asyncio
    async def test_flush_failure_becomes_database_error(self, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with(make_prompt())
        mock_db_session.flush.side_effect = RuntimeError("constraint")

        with pytest.raises(DatabaseError):
            await self.service.update_rating(mock_db_session, 1, 3)

    @pytest.mark.asyncio
    async def test_delete_prompt_returns_snapshot(self, mock_db_session, make_prompt):
        row = make_prompt(id=3, title="Doomed")
        mock_db_session.execute.return_value = result_with(row)

        result = await self.service.delete_prompt(mock_db_session, 3)

        assert result.id == 3
        assert result.title == "Doomed"
        mock_db_session.delete.assert_awaited_once_with(row)
