"""
Embedding Client

Thin wrapper around OpenAI embeddings. Failures come back as None rather
than raising so a bulk ingestion can skip a bad chunk and keep going.
No retry or backoff: rate limits are left to the provider.
"""

from langchain_openai import OpenAIEmbeddings


class EmbeddingClient:
    def __init__(self, api_key: str, model: str = "text-embedding-3-small"):
        self.model = model
        self._embeddings = OpenAIEmbeddings(
            model=model,
            openai_api_key=api_key,
            max_retries=0,
        )

    def embed(self, text: str) -> list[float] | None:
        """Embed one text synchronously (used by the ingestion run)."""
        try:
            return self._embeddings.embed_query(text)
        except Exception as e:
            print(f"[Embeddings] Error embedding chunk: \"{text[:50]}...\" {e}")
            return None

    async def aembed(self, text: str) -> list[float] | None:
        """Embed one text from request-handling code."""
        try:
            return await self._embeddings.aembed_query(text)
        except Exception as e:
            print(f"[Embeddings] Error embedding query: \"{text[:50]}...\" {e}")
            return None
