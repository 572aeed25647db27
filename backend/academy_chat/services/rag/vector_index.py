"""
Vector Index Client

Wraps the ChromaDB collection that holds the knowledge base. Each
namespace maps to its own collection (`<index>-<namespace>`), so several
knowledge bases can share one Chroma server without mixing vectors.

Uses the chromadb client directly with explicit embeddings; the
collection never embeds anything itself.
"""

import asyncio
import time

import chromadb
from chromadb.errors import NotFoundError
from pydantic import BaseModel


class VectorMetadata(BaseModel):
    text: str
    source: str


class EmbeddedVector(BaseModel):
    id: str
    values: list[float]
    metadata: VectorMetadata


class VectorMatch(BaseModel):
    text: str
    score: float
    source: str = ""


class IndexStats(BaseModel):
    name: str
    count: int
    dimension: int | None = None  # None until the first vector is stored


class UpsertReport(BaseModel):
    batches: int = 0
    failed_batches: int = 0
    upserted: int = 0


class VectorIndexClient:
    def __init__(self, client, index_name: str):
        self.client = client
        self.index_name = index_name
        self._collections = {}

    @classmethod
    def from_settings(cls, settings) -> "VectorIndexClient":
        """Connect to a Chroma server when a host is configured, else use local disk."""
        if settings.chroma_host:
            headers = {}
            if settings.chroma_api_key:
                headers["x-chroma-token"] = settings.chroma_api_key
            client = chromadb.HttpClient(
                host=settings.chroma_host,
                port=settings.chroma_port,
                ssl=settings.chroma_ssl,
                headers=headers,
            )
        else:
            client = chromadb.PersistentClient(path=settings.chroma_persist_dir)
        return cls(client, settings.vector_index_name)

    def collection_name(self, namespace: str) -> str:
        return f"{self.index_name}-{namespace}" if namespace else self.index_name

    def _collection(self, namespace: str):
        name = self.collection_name(namespace)
        if name not in self._collections:
            self._collections[name] = self.client.get_or_create_collection(
                name=name,
                metadata={"hnsw:space": "cosine"},
                embedding_function=None,
            )
        return self._collections[name]

    def _existing_collection(self, namespace: str):
        """Look up a collection without creating it. None when it does not exist."""
        name = self.collection_name(namespace)
        if name not in self._collections:
            try:
                self._collections[name] = self.client.get_collection(
                    name=name, embedding_function=None
                )
            except NotFoundError:
                return None
        return self._collections[name]

    def describe(self, namespace: str, create: bool = True) -> IndexStats | None:
        """
        Return count and stored vector dimension. Raises if the store is unreachable.

        With create=False the collection is only looked up, and None is
        returned when it has not been created yet.
        """
        if create:
            collection = self._collection(namespace)
        else:
            collection = self._existing_collection(namespace)
            if collection is None:
                return None
        count = collection.count()

        dimension = None
        if count:
            sample = collection.peek(limit=1)
            embeddings = sample.get("embeddings")
            if embeddings is not None and len(embeddings) > 0:
                dimension = len(embeddings[0])

        return IndexStats(name=collection.name, count=count, dimension=dimension)

    def upsert_batch(
        self,
        vectors: list[EmbeddedVector],
        namespace: str,
        batch_size: int = 100,
        pause_seconds: float = 0.5,
    ) -> UpsertReport:
        """
        Upsert vectors in fixed-size batches with a pause between batches.

        A failed batch is logged and skipped; earlier batches stay indexed
        and nothing is retried.
        """
        report = UpsertReport()
        collection = self._collection(namespace)

        for i in range(0, len(vectors), batch_size):
            batch = vectors[i:i + batch_size]
            report.batches += 1
            try:
                collection.upsert(
                    ids=[v.id for v in batch],
                    embeddings=[v.values for v in batch],
                    metadatas=[v.metadata.model_dump() for v in batch],
                )
                report.upserted += len(batch)
                print(
                    f"[VectorIndex] Upserted batch of {len(batch)} vectors "
                    f"to namespace \"{namespace}\"."
                )
            except Exception as e:
                report.failed_batches += 1
                print(f"[VectorIndex] Error upserting batch: {e}")

            if i + batch_size < len(vectors):
                time.sleep(pause_seconds)

        return report

    def query(self, vector: list[float], top_k: int, namespace: str) -> list[VectorMatch]:
        """Nearest chunks, best match first. Empty list when nothing is indexed."""
        collection = self._collection(namespace)
        result = collection.query(
            query_embeddings=[vector],
            n_results=top_k,
            include=["metadatas", "distances"],
        )

        # result["metadatas"] = [[meta1, ...]], result["distances"] = [[d1, ...]]
        metas_list = result["metadatas"][0] if result.get("metadatas") else []
        distances = result["distances"][0] if result.get("distances") else []

        matches = []
        for meta, distance in zip(metas_list, distances):
            meta = meta or {}
            matches.append(
                VectorMatch(
                    text=meta.get("text") or "",
                    score=1.0 - float(distance),
                    source=meta.get("source") or "",
                )
            )

        matches.sort(key=lambda m: m.score, reverse=True)
        return matches

    async def aquery(self, vector: list[float], top_k: int, namespace: str) -> list[VectorMatch]:
        # chromadb clients are blocking; keep them off the event loop
        return await asyncio.to_thread(self.query, vector, top_k, namespace)
