"""
Application context

The long-lived clients (embeddings, vector index, record store, LLM
provider) are created once at startup and handed to request handlers
through FastAPI dependencies instead of module-level singletons.
"""

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from academy_chat.core.config import Settings
from academy_chat.core.database import create_engine, create_session_factory
from academy_chat.services.llm.base import LLMProvider
from academy_chat.services.llm.openai_chat import OpenAIChatProvider
from academy_chat.services.llm.orchestrator import ChatOrchestrator
from academy_chat.services.rag.embeddings import EmbeddingClient
from academy_chat.services.rag.retriever import ContextRetriever
from academy_chat.services.rag.vector_index import VectorIndexClient
from academy_chat.services.record_store import RecordStore


@dataclass
class AppContext:
    settings: Settings
    embeddings: EmbeddingClient
    vector_index: VectorIndexClient
    record_store: RecordStore
    provider: LLMProvider
    engine: AsyncEngine | None = None

    def retriever(self) -> ContextRetriever:
        return ContextRetriever(
            self.embeddings, self.vector_index, self.settings.vector_namespace
        )

    def orchestrator(self) -> ChatOrchestrator:
        return ChatOrchestrator(
            retriever=self.retriever(),
            store=self.record_store,
            provider=self.provider,
            model=self.settings.openai_model,
            top_k=self.settings.retrieval_top_k,
            max_tool_rounds=self.settings.max_tool_rounds,
        )


def build_app_context(settings: Settings) -> AppContext:
    engine = create_engine(settings.database_url)
    return AppContext(
        settings=settings,
        embeddings=EmbeddingClient(settings.openai_api_key, settings.embedding_model),
        vector_index=VectorIndexClient.from_settings(settings),
        record_store=RecordStore(create_session_factory(engine)),
        provider=OpenAIChatProvider(settings.openai_api_key),
        engine=engine,
    )


def get_app_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context built at startup."""
    return request.app.state.context
