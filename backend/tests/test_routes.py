"""
PromptShelf Backend — API Route Tests
======================================

What:  HTTP-level tests: status codes, error body shape, headers.
How:   HTTPX AsyncClient over ASGITransport with the DB session dependency
       overridden by ``mock_db_session``; Gemini and the engine are patched.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from app.config import settings
from app.constructor.fields import EMPTY_DOCUMENT_TEXT
from app.exceptions import LLMServiceError
from app.services.gemini_service import gemini_service

from helpers import result_with, result_with_rows


class TestErrorShape:

    @pytest.mark.asyncio
    async def test_schema_violation_is_400_with_field_details(self, test_client):
        response = await test_client.post("/api/prompts", json={"title": "  ", "content": "x"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Validation failed"
        assert {"field": "title", "message": "Title is required"} in body["details"]

    @pytest.mark.asyncio
    async def test_rating_out_of_range(self, test_client):
        response = await test_client.patch("/api/prompts/1/rating", json={"rating": 6})

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "rating"

    @pytest.mark.asyncio
    async def test_non_positive_id_is_rejected(self, test_client):
        response = await test_client.get("/api/prompts/0")

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "prompt_id"

    @pytest.mark.asyncio
    async def test_not_found_is_404(self, test_client, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        response = await test_client.get("/api/prompts/12")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert response.json()["message"] == "Prompt not found"

    @pytest.mark.asyncio
    async def test_database_failure_is_generic_500(self, test_client, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("password authentication failed")

        response = await test_client.get("/api/notes")

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert "password" not in response.text

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        response = await test_client.get("/api/notes/3", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["request_id"] == "trace-42"


class TestPromptRoutes:

    @pytest.mark.asyncio
    async def test_list_prompts(self, test_client, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with_rows([make_prompt()])

        response = await test_client.get("/api/prompts")

        assert response.status_code == 200
        assert response.json()[0]["title"] == "Code reviewer"

    @pytest.mark.asyncio
    async def test_create_prompt_returns_201(self, test_client, mock_db_session):
        def assign_id():
            mock_db_session.add.call_args.args[0].id = 5

        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        response = await test_client.post(
            "/api/prompts",
            json={"title": "Haiku", "content": "Write a haiku", "tags": ["poetry"], "model": ""},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 5
        assert body["model"] is None
        assert body["tags"] == ["poetry"]

    @pytest.mark.asyncio
    async def test_delete_prompt(self, test_client, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with(make_prompt(id=9))

        response = await test_client.delete("/api/prompts/9")

        assert response.status_code == 200
        assert response.json()["message"] == "Prompt deleted successfully"
        assert response.json()["prompt"]["id"] == 9

    @pytest.mark.asyncio
    async def test_export_csv(self, test_client, mock_db_session, make_prompt):
        mock_db_session.execute.return_value = result_with_rows([make_prompt()])

        response = await test_client.get("/api/prompts/export.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "prompts-library-" in response.headers["content-disposition"]
        assert response.text.splitlines()[1].startswith('"Code reviewer"')

    @pytest.mark.asyncio
    async def test_analyze(self, test_client):
        response = await test_client.post("/api/prompts/analyze", json={"content": "abcdefgh"})

        assert response.status_code == 200
        assert response.json()["estimated_tokens"] == 2
        assert response.json()["confidence"]["level"] == "low"

    @pytest.mark.asyncio
    async def test_refine_success(self, test_client):
        with patch.object(gemini_service, "refine_prompt", AsyncMock(return_value="Better")):
            response = await test_client.post("/api/prompts/refine", json={"prompt": "make it good"})

        assert response.status_code == 200
        assert response.json() == {"refined_prompt": "Better"}

    @pytest.mark.asyncio
    async def test_refine_without_key_is_503(self, test_client):
        with patch.object(settings, "gemini_api_key", ""):
            response = await test_client.post("/api/prompts/refine", json={"prompt": "hello"})

        assert response.status_code == 503
        assert response.json()["error"] == "llm_not_configured"

    @pytest.mark.asyncio
    async def test_refine_blank_prompt_is_400(self, test_client):
        response = await test_client.post("/api/prompts/refine", json={"prompt": "   "})

        assert response.status_code == 400
        assert response.json()["details"] == [{"field": "prompt", "message": "Prompt cannot be empty"}]

    @pytest.mark.asyncio
    async def test_refine_provider_failure_is_503(self, test_client):
        failure = LLMServiceError(message="Gemini down", retry_after=30)
        with patch.object(gemini_service, "refine_prompt", AsyncMock(side_effect=failure)):
            response = await test_client.post("/api/prompts/refine", json={"prompt": "hello"})

        assert response.status_code == 503
        assert response.json()["error"] == "llm_service_error"
        assert response.headers["Retry-After"] == "30"


class TestNoteRoutes:

    @pytest.mark.asyncio
    async def test_list_notes_by_folder(self, test_client, mock_db_session, make_note):
        mock_db_session.execute.return_value = result_with_rows([make_note(folder="work")])

        response = await test_client.get("/api/notes", params={"folder": " work "})

        assert response.status_code == 200
        assert response.json()[0]["folder"] == "work"

    @pytest.mark.asyncio
    async def test_create_note_defaults(self, test_client, mock_db_session):
        def assign_id():
            mock_db_session.add.call_args.args[0].id = 1

        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        response = await test_client.post("/api/notes", json={})

        assert response.status_code == 201
        assert response.json()["title"] == "Untitled"
        assert response.json()["color"] == "default"

    @pytest.mark.asyncio
    async def test_toggle_pin(self, test_client, mock_db_session, make_note):
        mock_db_session.execute.return_value = result_with(make_note(is_pinned=False))

        response = await test_client.patch("/api/notes/1/pin")

        assert response.status_code == 200
        assert response.json()["is_pinned"] is True

    @pytest.mark.asyncio
    async def test_move_to_folder_blank_clears(self, test_client, mock_db_session, make_note):
        mock_db_session.execute.return_value = result_with(make_note(folder="old"))

        response = await test_client.patch("/api/notes/1/folder", json={"folder": "  "})

        assert response.status_code == 200
        assert response.json()["folder"] is None


class TestRequirementsRoutes:

    @pytest.mark.asyncio
    async def test_options_for_backend(self, test_client):
        response = await test_client.get(
            "/api/requirements/options", params={"backend_framework": "FastAPI"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["backend_framework"] == "FastAPI"
        assert body["fields"]["testing_framework"]["choices"] == ["Pytest", "Jest", "Vitest"]

    @pytest.mark.asyncio
    async def test_generate_empty_form(self, test_client):
        response = await test_client.post("/api/requirements/generate", json={})

        assert response.json() == {"document": EMPTY_DOCUMENT_TEXT, "is_empty": True}

    @pytest.mark.asyncio
    async def test_generate_and_merge(self, test_client):
        first = await test_client.post(
            "/api/requirements/generate",
            json={"frontend_framework": {"choice": "React"}},
        )
        second = await test_client.post(
            "/api/requirements/generate",
            json={"frontend_framework": {"choice": "Vue"}},
        )
        previous = first.json()["document"]
        displayed = previous + "\nDeploy via Vercel."

        merged = await test_client.post(
            "/api/requirements/merge",
            json={
                "displayed": displayed,
                "generated": second.json()["document"],
                "previous": previous,
            },
        )

        assert merged.status_code == 200
        assert merged.json()["document"] == (
            "## Technical Architecture\nFrontend Framework: Vue\nDeploy via Vercel."
        )

    @pytest.mark.asyncio
    async def test_generate_rejects_wrong_shape(self, test_client):
        response = await test_client.post(
            "/api/requirements/generate", json={"frontend_framework": "React"},
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "frontend_framework"


class TestHealth:

    @staticmethod
    def _engine(ok: bool):
        engine = MagicMock()
        if ok:
            conn = MagicMock()
            conn.execute = AsyncMock()
            engine.connect.return_value.__aenter__ = AsyncMock(return_value=conn)
            engine.connect.return_value.__aexit__ = AsyncMock(return_value=False)
        else:
            engine.connect.side_effect = OSError("connection refused")
        return engine

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        with patch("app.routes.health.engine", self._engine(ok=True)), \
             patch.object(gemini_service, "health_check", AsyncMock(return_value=True)):
            response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["llm"] == "available"

    @pytest.mark.asyncio
    async def test_degraded_without_key(self, test_client):
        with patch("app.routes.health.engine", self._engine(ok=True)), \
             patch.object(settings, "gemini_api_key", ""):
            response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["llm"] == "not_configured"

    @pytest.mark.asyncio
    async def test_unhealthy_without_database(self, test_client):
        with patch("app.routes.health.engine", self._engine(ok=False)), \
             patch.object(gemini_service, "health_check", AsyncMock(return_value=True)):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
