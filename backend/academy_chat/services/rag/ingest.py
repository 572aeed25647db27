"""
Knowledge Base Ingestion Script

Loads the academy's knowledge-base document, splits it into chunks,
embeds them using OpenAI, and upserts them into the ChromaDB namespace
the chat endpoint reads from.

How it works:
1. CHECK  – Describe the target collection; abort if the store is
           unreachable, warn if the stored dimension does not match the
           embedding model
2. LOAD   – LangChain document loaders read the PDF/DOCX (plain text files
           are read directly)
3. CLEAN  – Collapse blank-line runs and repeated whitespace
4. SPLIT  – Fixed 1500-char windows with 200 chars of overlap
5. EMBED  – One embedding call per chunk, serially; failed chunks are skipped
6. STORE  – Batched upserts of 100 vectors with a short pause between batches

Usage:
    cd backend
    python -m academy_chat.services.rag.ingest [path/to/document.pdf]
"""

import re
import sys
import time
from pathlib import Path

from langchain_community.document_loaders import Docx2txtLoader, PyMuPDFLoader
from pydantic import BaseModel

from academy_chat.core.config import Settings, expected_embedding_dimension
from academy_chat.services.rag.chunker import build_chunks
from academy_chat.services.rag.embeddings import EmbeddingClient
from academy_chat.services.rag.vector_index import (
    EmbeddedVector,
    VectorIndexClient,
    VectorMetadata,
)


class IngestionError(Exception):
    """The run cannot proceed: source unreadable or index unreachable."""


class IngestionSummary(BaseModel):
    source: str
    chunked: int = 0
    embedded: int = 0
    upserted: int = 0
    failed_embeddings: int = 0
    failed_batches: int = 0


# ── Text Extraction ──────────────────────────────────────────────────────────

def extract_text(source_path: str) -> str:
    """
    Read the raw text of a knowledge-base document.

    - PyMuPDFLoader: .pdf, one Document per page
    - Docx2txtLoader: .docx
    - .txt / .md are read as UTF-8
    """
    path = Path(source_path)
    if not path.is_file():
        raise IngestionError(f"Source document not found: {source_path}")

    suffix = path.suffix.lower()
    try:
        if suffix in (".txt", ".md"):
            return path.read_text(encoding="utf-8")
        if suffix == ".pdf":
            loader = PyMuPDFLoader(str(path))
        elif suffix == ".docx":
            loader = Docx2txtLoader(str(path))
        else:
            raise IngestionError(f"Unsupported document type: {path.suffix}")
        docs = loader.load()
    except IngestionError:
        raise
    except Exception as e:
        raise IngestionError(f"Could not read {path.name}: {e}") from e

    return "\n".join(doc.page_content for doc in docs)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of line breaks to one newline, then any whitespace run to one space."""
    text = re.sub(r"(\r\n|\n|\r){2,}", "\n", text)
    return re.sub(r"\s{2,}", " ", text)


# ── Index Check ──────────────────────────────────────────────────────────────

def check_index(index: VectorIndexClient, namespace: str, embedding_model: str) -> None:
    """Abort if the index cannot be reached; only warn on a dimension mismatch."""
    print(f"[Ingest] Describing vector index: {index.collection_name(namespace)}...")
    try:
        stats = index.describe(namespace)
    except Exception as e:
        raise IngestionError(
            f"Failed to connect to or describe the vector index. "
            f"Check that the Chroma server is up and the credentials are valid: {e}"
        ) from e

    print(f"[Ingest] Index stats: {stats.model_dump()}")

    expected = expected_embedding_dimension(embedding_model)
    if stats.dimension is not None and stats.dimension != expected:
        print(
            f"[Ingest] WARNING: index dimension ({stats.dimension}) might not match "
            f"embedding model dimension ({expected} for {embedding_model})."
        )


# ── Embedding ────────────────────────────────────────────────────────────────

def embed_chunks(
    chunks: list,
    embeddings: EmbeddingClient,
    run_id: int,
) -> tuple[list[EmbeddedVector], int]:
    """
    Embed chunks one at a time and wrap them as vector records.

    IDs combine source name, run timestamp and chunk position so re-runs
    never overwrite each other.

    Returns:
        (vectors, failed_count)
    """
    vectors = []
    failed = 0
    total = len(chunks)
    for chunk in chunks:
        sys.stdout.write(f"Embedding chunk {chunk.sequence_index + 1}/{total}...\r")
        sys.stdout.flush()
        values = embeddings.embed(chunk.text)
        if values is None:
            failed += 1
            continue
        vectors.append(
            EmbeddedVector(
                id=f"doc_chunk_{chunk.source_id}_{run_id}_{chunk.sequence_index}",
                values=values,
                metadata=VectorMetadata(text=chunk.text, source=chunk.source_id),
            )
        )
    sys.stdout.write("\n")
    return vectors, failed


# ── Main ─────────────────────────────────────────────────────────────────────

def run_ingestion(
    source_path: str,
    settings: Settings,
    embeddings: EmbeddingClient,
    index: VectorIndexClient,
) -> IngestionSummary:
    """Run the full ingestion pipeline for one document."""
    namespace = settings.vector_namespace
    source_name = Path(source_path).name
    summary = IngestionSummary(source=source_name)

    print("=" * 60)
    print("Knowledge Base Ingestion Pipeline")
    print("=" * 60)
    print(f"  Document:  {source_path}")
    print(f"  Index:     {settings.vector_index_name}")
    print(f"  Namespace: {namespace}")
    print()

    # Step 1: Make sure the index is reachable
    print("[Step 1] Checking vector index...")
    check_index(index, namespace, embeddings.model)

    # Step 2: Load and clean
    print("\n[Step 2] Reading document...")
    raw_text = extract_text(source_path)
    print(f"  Extracted {len(raw_text)} characters.")
    cleaned = normalize_whitespace(raw_text)

    # Step 3: Split into chunks
    print(
        f"\n[Step 3] Splitting into chunks "
        f"(size={settings.chunk_size}, overlap={settings.chunk_overlap})..."
    )
    chunks = build_chunks(
        cleaned, source_name, settings.chunk_size, settings.chunk_overlap
    )
    summary.chunked = len(chunks)
    print(f"  Text chunked into {len(chunks)} pieces.")
    if not chunks:
        print("[Ingest] No text chunks generated. Nothing to do.")
        return summary

    # Step 4: Embed
    print("\n[Step 4] Generating embeddings...")
    run_id = int(time.time() * 1000)
    vectors, failed = embed_chunks(chunks, embeddings, run_id)
    summary.embedded = len(vectors)
    summary.failed_embeddings = failed
    if failed:
        print(f"  {failed} chunk(s) could not be embedded and were skipped.")
    if not vectors:
        print("[Ingest] No embeddings were generated. Nothing to upload.")
        return summary

    # Step 5: Upsert
    print(f"\n[Step 5] Upserting {len(vectors)} vectors...")
    report = index.upsert_batch(
        vectors,
        namespace,
        batch_size=settings.upsert_batch_size,
        pause_seconds=settings.upsert_batch_pause_seconds,
    )
    summary.upserted = report.upserted
    summary.failed_batches = report.failed_batches

    print(f"\n{'=' * 60}")
    print(
        f"Ingestion complete! chunked={summary.chunked} "
        f"embedded={summary.embedded} upserted={summary.upserted}"
    )
    print(f"{'=' * 60}")
    return summary


def main() -> None:
    from academy_chat.core.config import get_settings

    settings = get_settings()
    source_path = sys.argv[1] if len(sys.argv) > 1 else settings.knowledge_base_path

    embeddings = EmbeddingClient(settings.openai_api_key, settings.embedding_model)
    index = VectorIndexClient.from_settings(settings)

    try:
        run_ingestion(source_path, settings, embeddings, index)
    except IngestionError as e:
        print(f"[Ingest] ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
