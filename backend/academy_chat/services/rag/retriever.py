"""
RAG Retriever Service

Finds knowledge-base chunks relevant to the user's latest message.

How retrieval works:
1. The query string is converted into a vector with OpenAI embeddings.
2. ChromaDB compares this vector against the stored chunk vectors in the
   academy namespace (cosine similarity).
3. The top-K chunk texts are joined with a separator line and returned
   for the system prompt.

Failures never raise: the caller gets one of the literal fallback
strings below and treats "no context" and "error" the same way.
"""

from academy_chat.services.rag.embeddings import EmbeddingClient
from academy_chat.services.rag.vector_index import VectorIndexClient


NO_CONTEXT_FOUND = "No se encontró contexto relevante en la base de conocimiento."
CONTEXT_ERROR = "Error al obtener contexto de la base de conocimiento."
# Returned when matches exist but none of them carries any text
EMPTY_CONTEXT = ""

CHUNK_SEPARATOR = "\n---\n"

FALLBACK_CONTEXTS = (NO_CONTEXT_FOUND, CONTEXT_ERROR)


def has_meaningful_context(context: str | None) -> bool:
    """True when the context holds real knowledge-base text."""
    if not context:
        return False
    return not any(fallback in context for fallback in FALLBACK_CONTEXTS)


class ContextRetriever:
    def __init__(
        self,
        embeddings: EmbeddingClient,
        index: VectorIndexClient,
        namespace: str,
    ):
        self.embeddings = embeddings
        self.index = index
        self.namespace = namespace

    async def retrieve(self, query: str, top_k: int = 3) -> str:
        """
        Retrieve the top-K knowledge-base chunks for a user query.

        Args:
            query: The user's latest message
            top_k: Number of chunks to retrieve (default 3)

        Returns:
            The chunk texts joined by CHUNK_SEPARATOR, NO_CONTEXT_FOUND when
            the index has no matches, CONTEXT_ERROR when embedding or the
            index query fails, EMPTY_CONTEXT when matches carry no text.
        """
        vector = await self.embeddings.aembed(query)
        if vector is None:
            return CONTEXT_ERROR

        try:
            matches = await self.index.aquery(vector, top_k, self.namespace)
        except Exception as e:
            print(f"[RAG] Error fetching context from vector index: {e}")
            return CONTEXT_ERROR

        if not matches:
            print(f"[RAG] No results for query: {query[:80]}")
            return NO_CONTEXT_FOUND

        texts = [m.text for m in matches if m.text]
        print(f"[RAG] Retrieved {len(texts)} chunks for: {query[:80]}")
        return CHUNK_SEPARATOR.join(texts) if texts else EMPTY_CONTEXT
