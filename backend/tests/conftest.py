"""
Shared test fixtures.

Provides: required environment for Settings, an in-memory SQLite record
store, a scripted LLM provider, and an AppContext wired with mocks.
"""

import os

# Settings are read at import time by academy_chat.main
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("VECTOR_INDEX_NAME", "test-index")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from academy_chat.core.config import Settings
from academy_chat.core.context import AppContext
from academy_chat.core.database import create_session_factory, create_tables
from academy_chat.services.llm.base import LLMProvider
from academy_chat.services.llm.models import StreamChunk, ToolCall
from academy_chat.services.record_store import RecordStore, TrialSessionData


class ScriptedProvider(LLMProvider):
    """LLM provider that replays one prepared list of chunks per call."""

    provider_name = "scripted"

    def __init__(self, scripts: list[list[StreamChunk]]):
        self.scripts = list(scripts)
        self.calls = []

    async def stream_chat(
        self,
        system_prompt,
        messages,
        model,
        tools=None,
        temperature=0.3,
    ):
        self.calls.append({
            "system_prompt": system_prompt,
            "messages": list(messages),
            "model": model,
            "tools": tools,
        })
        for chunk in self.scripts.pop(0):
            yield chunk


def text_reply(*parts: str) -> list[StreamChunk]:
    return [StreamChunk(text=p) for p in parts] + [StreamChunk(finish_reason="stop")]


def tool_request(call_id: str, name: str, arguments: str) -> list[StreamChunk]:
    return [
        StreamChunk(
            tool_calls=[ToolCall(id=call_id, name=name, arguments=arguments)],
            finish_reason="tool_calls",
        )
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        vector_index_name="test-index",
        database_url="sqlite+aiosqlite:///:memory:",
        upsert_batch_pause_seconds=0,
    )


@pytest.fixture
async def record_store():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield RecordStore(create_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def trial_data() -> TrialSessionData:
    return TrialSessionData(
        category="Sub-10",
        testDay="Sábado",
        testTimes="10:00 am",
        childrenFullName="Mateo Quispe Rojas",
        childrenAge=9,
        parentFullName="Lucía Rojas Vega",
        phone="987654321",
        email="lucia.rojas@example.com",
    )


@pytest.fixture
def mock_embeddings():
    embeddings = MagicMock()
    embeddings.model = "text-embedding-3-small"
    embeddings.aembed = AsyncMock(return_value=[0.1, 0.2, 0.3])
    return embeddings


@pytest.fixture
def mock_vector_index():
    index = MagicMock()
    index.aquery = AsyncMock(return_value=[])
    index.collection_name.side_effect = lambda ns: f"test-index-{ns}"
    return index


@pytest.fixture
def make_context(settings, mock_embeddings, mock_vector_index):
    def _make(provider: LLMProvider, store=None) -> AppContext:
        if store is None:
            store = MagicMock(spec=RecordStore)
        return AppContext(
            settings=settings,
            embeddings=mock_embeddings,
            vector_index=mock_vector_index,
            record_store=store,
            provider=provider,
        )

    return _make
