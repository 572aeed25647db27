"""
RAG (Retrieval-Augmented Generation) Pipeline

Gives the chat assistant the academy's own facts by:
1. Ingesting the knowledge-base document into a ChromaDB namespace (offline)
2. Retrieving the chunks closest to the user's latest message
3. Handing the joined chunk text to the prompt compiler
"""

from academy_chat.services.rag.retriever import ContextRetriever, has_meaningful_context
from academy_chat.services.rag.chunker import chunk_text

__all__ = [
    "ContextRetriever",
    "has_meaningful_context",
    "chunk_text",
]
