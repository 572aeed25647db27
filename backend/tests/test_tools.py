"""Tests for the chat tools and argument validation."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from academy_chat.services.record_store import CreateResult, ListResult, RecordStore
from academy_chat.services.tools import build_chat_tools, execute_tool


VALID_ARGS = {
    "category": "Sub-10",
    "testDay": "Sábado",
    "testTimes": "10:00 am",
    "childrenFullName": "Mateo Quispe Rojas",
    "childrenAge": 9,
    "parentFullName": "Lucía Rojas Vega",
    "phone": "987654321",
    "email": "lucia.rojas@example.com",
}


@pytest.fixture
def mock_store():
    return MagicMock(spec=RecordStore)


class TestToolSpecs:
    def test_openai_function_specs(self, mock_store):
        tools = build_chat_tools(mock_store)
        specs = {t.name: t.openai_spec() for t in tools.values()}

        booking = specs["book_trial_session"]["function"]["parameters"]
        assert booking["type"] == "object"
        assert set(booking["required"]) == set(VALID_ARGS)
        assert specs["get_alumnos_list"]["function"]["parameters"]["properties"] == {}


class TestBookTrialSession:
    @pytest.mark.asyncio
    async def test_missing_email_is_rejected_before_execution(self, mock_store):
        tools = build_chat_tools(mock_store)
        args = {k: v for k, v in VALID_ARGS.items() if k != "email"}

        result = await execute_tool(tools, "book_trial_session", json.dumps(args))

        assert result["status"] == "error"
        assert [e["field"] for e in result["errors"]] == ["email"]
        mock_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_string_age_is_rejected(self, mock_store):
        tools = build_chat_tools(mock_store)
        args = VALID_ARGS | {"childrenAge": "nueve"}

        result = await execute_tool(tools, "book_trial_session", json.dumps(args))

        assert result["status"] == "error"
        mock_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_json_is_rejected(self, mock_store):
        tools = build_chat_tools(mock_store)

        result = await execute_tool(tools, "book_trial_session", '{"category": ')

        assert result["status"] == "error"
        mock_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_booking_is_saved(self, record_store):
        tools = build_chat_tools(record_store)

        result = await execute_tool(tools, "book_trial_session", json.dumps(VALID_ARGS))

        assert result["status"] == "success"
        assert "ID de registro:" in result["message"]
        record_id = result["message"].split("ID de registro: ")[1].split(".")[0]
        assert record_id
        assert result["details"]["email"] == "lucia.rojas@example.com"

    @pytest.mark.asyncio
    async def test_store_error_is_reported(self, mock_store):
        mock_store.create = AsyncMock(return_value=CreateResult(success=False, error="timeout"))
        tools = build_chat_tools(mock_store)

        result = await execute_tool(tools, "book_trial_session", json.dumps(VALID_ARGS))

        assert result["status"] == "error"
        assert "timeout" in result["message"]
        assert result["details"]["childrenFullName"] == "Mateo Quispe Rojas"


class TestGetAlumnosList:
    @pytest.mark.asyncio
    async def test_count_reflects_new_records(self, record_store, trial_data):
        tools = build_chat_tools(record_store)
        await record_store.create(trial_data)

        first = await execute_tool(tools, "get_alumnos_list", "{}")
        await record_store.create(trial_data.model_copy(update={"childrenFullName": "Sofía Quispe"}))
        second = await execute_tool(tools, "get_alumnos_list", "{}")

        assert first["count"] == 1
        assert second["count"] == 2

    @pytest.mark.asyncio
    async def test_preview_has_at_most_three_names(self, record_store, trial_data):
        for i in range(5):
            await record_store.create(
                trial_data.model_copy(update={"childrenFullName": f"Alumno {i}"})
            )
        tools = build_chat_tools(record_store)

        result = await execute_tool(tools, "get_alumnos_list", "")

        assert result["status"] == "success"
        assert result["count"] == 5
        assert len(result["preview"]) == 3
        assert set(result["preview"][0]) == {"nombre"}

    @pytest.mark.asyncio
    async def test_no_students(self, record_store):
        tools = build_chat_tools(record_store)

        result = await execute_tool(tools, "get_alumnos_list", "{}")

        assert result == {
            "status": "success",
            "message": "No hay alumnos registrados actualmente.",
            "count": 0,
        }

    @pytest.mark.asyncio
    async def test_store_error(self, mock_store):
        mock_store.list_all = AsyncMock(return_value=ListResult(success=False, error="permission denied"))
        tools = build_chat_tools(mock_store)

        result = await execute_tool(tools, "get_alumnos_list", "{}")

        assert result["status"] == "error"
        assert "permission denied" in result["message"]


@pytest.mark.asyncio
async def test_unknown_tool(mock_store):
    result = await execute_tool(build_chat_tools(mock_store), "delete_everything", "{}")
    assert result["status"] == "error"
