from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # OpenAI (chat + embeddings)
    openai_api_key: str
    openai_model: str = "gpt-4o"
    embedding_model: str = "text-embedding-3-small"

    # Vector store (ChromaDB). Empty host -> embedded persistent store.
    vector_index_name: str
    vector_namespace: str = "americano-fc-kb"
    chroma_host: str = ""
    chroma_port: int = 8000
    chroma_ssl: bool = False
    chroma_api_key: str = ""
    chroma_persist_dir: str = "chroma_data"

    # Record store
    database_url: str
    auto_create_tables: bool = True

    # Knowledge base ingestion
    knowledge_base_path: str = "knowledge_base/Base de conocimiento Americano Academy Peru.pdf"
    chunk_size: int = 1500
    chunk_overlap: int = 200
    upsert_batch_size: int = 100
    upsert_batch_pause_seconds: float = 0.5

    # Chat
    retrieval_top_k: int = 3
    max_tool_rounds: int = 2

    # URLs
    frontend_url: str = "http://localhost:3000"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @model_validator(mode="after")
    def check_chunk_window(self) -> "Settings":
        # overlap >= size would never advance the window
        if self.chunk_overlap < 0 or self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be >= 0 and "
                f"smaller than chunk_size ({self.chunk_size})"
            )
        return self


def expected_embedding_dimension(model: str) -> int:
    """Vector length produced by an OpenAI embedding model."""
    if model in ("text-embedding-3-small", "text-embedding-ada-002"):
        return 1536
    return 3072


@lru_cache()
def get_settings() -> Settings:
    return Settings()
