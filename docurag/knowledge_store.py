"""Namespaced document store: chunks text, embeds it and keeps the vectors in Qdrant."""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    FilterSelector,
    MatchValue,
    PayloadSchemaType,
    PointStruct,
    VectorParams,
)

from docurag.chunker import chunk_text
from docurag.embeddings import EmbeddingModel

logger = logging.getLogger(__name__)

UPSERT_BATCH_SIZE = 64


@dataclass(frozen=True)
class WriteAck:
    entry_id: str
    chunks: int


@dataclass(frozen=True)
class SearchHit:
    entry_id: str
    order: int
    text: str
    score: float
    source: Optional[str] = None


def namespace_filter(namespace: str) -> Filter:
    return Filter(must=[FieldCondition(key="namespace", match=MatchValue(value=namespace))])


def entry_filter(entry_id: str) -> Filter:
    return Filter(must=[FieldCondition(key="entry_id", match=MatchValue(value=entry_id))])


class KnowledgeStore:
    def __init__(
        self,
        client: AsyncQdrantClient,
        embedder: EmbeddingModel,
        *,
        collection_name: str,
        chunk_max_chars: int = 1000,
    ):
        self.client = client
        self.embedder = embedder
        self.collection_name = collection_name
        self.chunk_max_chars = chunk_max_chars
        self._collection_ready = False
        self._collection_lock = asyncio.Lock()

    async def close(self):
        await self.client.close()

    async def _ensure_collection(self):
        if self._collection_ready:
            return
        async with self._collection_lock:
            if self._collection_ready:
                return
            if not await self.client.collection_exists(self.collection_name):
                await self.client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=VectorParams(size=self.embedder.dimension, distance=Distance.COSINE),
                )
                await self.client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name="namespace",
                    field_schema=PayloadSchemaType.KEYWORD,
                )
                await self.client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name="entry_id",
                    field_schema=PayloadSchemaType.KEYWORD,
                )
                logger.info(f"Created collection '{self.collection_name}' | dimension={self.embedder.dimension}")
            self._collection_ready = True

    async def write(self, namespace: str, text: str, source: Optional[str] = None) -> WriteAck:
        entry_id = str(uuid.uuid4())
        chunks = chunk_text(text, entry_id=entry_id, max_chars=self.chunk_max_chars)
        if not chunks:
            raise ValueError("Text produced no chunks")

        embeddings = await self.embedder.embed_documents([c["text"] for c in chunks])
        await self._ensure_collection()

        points = [
            PointStruct(
                id=chunk["id"],
                vector=emb.tolist(),
                payload={
                    "namespace": namespace,
                    "entry_id": entry_id,
                    "source": source,
                    "order": chunk["order"],
                    "text": chunk["text"],
                },
            )
            for emb, chunk in zip(embeddings, chunks)
        ]

        try:
            for i in range(0, len(points), UPSERT_BATCH_SIZE):
                batch = points[i : i + UPSERT_BATCH_SIZE]
                await self.client.upsert(collection_name=self.collection_name, points=batch)
        except Exception:
            await self._discard_entry(entry_id)
            raise

        logger.info(f"Stored entry | namespace={namespace} | entry_id={entry_id} | chunks={len(points)}")
        return WriteAck(entry_id=entry_id, chunks=len(points))

    async def _discard_entry(self, entry_id: str):
        """Remove every chunk of a partially written entry."""
        logger.warning(f"Rolling back partial write | entry_id={entry_id}")
        try:
            await self.client.delete(
                collection_name=self.collection_name,
                points_selector=FilterSelector(filter=entry_filter(entry_id)),
            )
        except Exception as e:
            logger.error(f"Rollback failed | entry_id={entry_id} | error={e}")

    async def query(
        self,
        namespace: str,
        query_text: str,
        limit: int,
        score_threshold: float,
    ) -> List[SearchHit]:
        query_embedding = await self.embedder.embed_query(query_text)

        if not await self.client.collection_exists(self.collection_name):
            return []

        response = await self.client.query_points(
            collection_name=self.collection_name,
            query=query_embedding.tolist(),
            query_filter=namespace_filter(namespace),
            limit=limit,
            score_threshold=score_threshold,
            with_payload=True,
        )

        hits: List[SearchHit] = []
        for point in response.points:
            payload = point.payload or {}
            text = payload.get("text")
            entry_id = payload.get("entry_id")
            if not text or not entry_id:
                logger.warning(f"Skipping malformed chunk: {payload}")
                continue
            score = min(max(float(point.score), 0.0), 1.0)
            if score < score_threshold:
                continue
            hits.append(
                SearchHit(
                    entry_id=entry_id,
                    order=int(payload.get("order", 0)),
                    text=text,
                    score=score,
                    source=payload.get("source"),
                )
            )

        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:limit]
