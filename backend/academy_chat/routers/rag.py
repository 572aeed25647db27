"""
RAG Admin Router

Provides endpoints to check the vector index and trigger re-ingestion.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from academy_chat.core.context import AppContext, get_app_context
from academy_chat.services.rag.ingest import IngestionError, IngestionSummary, run_ingestion

router = APIRouter()


class RAGStatusResponse(BaseModel):
    available: bool
    chunk_count: int
    index_name: str
    namespace: str
    dimension: int | None = None
    message: str = ""


@router.get("/status", response_model=RAGStatusResponse)
def rag_status(ctx: AppContext = Depends(get_app_context)):
    """Check the status of the knowledge-base vector index."""
    namespace = ctx.settings.vector_namespace
    index_name = ctx.vector_index.collection_name(namespace)
    try:
        stats = ctx.vector_index.describe(namespace, create=False)
    except Exception as e:
        return RAGStatusResponse(
            available=False,
            chunk_count=0,
            index_name=index_name,
            namespace=namespace,
            message=f"Failed to reach the vector index: {e}",
        )

    if stats is None:
        return RAGStatusResponse(
            available=False,
            chunk_count=0,
            index_name=index_name,
            namespace=namespace,
            message="Index does not exist yet. Run ingestion first.",
        )

    return RAGStatusResponse(
        available=True,
        chunk_count=stats.count,
        index_name=stats.name,
        namespace=namespace,
        dimension=stats.dimension,
        message="" if stats.count else "Index is empty. Run ingestion first.",
    )


@router.post("/ingest", response_model=IngestionSummary)
def trigger_ingestion(ctx: AppContext = Depends(get_app_context)):
    """
    Re-ingest the configured knowledge-base document.

    Runs in the threadpool; embedding is serial, so this can take a while
    for large documents.
    """
    try:
        return run_ingestion(
            ctx.settings.knowledge_base_path,
            ctx.settings,
            ctx.embeddings,
            ctx.vector_index,
        )
    except IngestionError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Ingestion failed: {str(e)}",
        )
