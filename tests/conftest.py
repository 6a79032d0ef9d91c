"""Pytest configuration and fixtures shared by the test suite."""

import hashlib
import re
from typing import List

import pytest
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import FakeListChatModel
from qdrant_client import AsyncQdrantClient

from docurag.config import Settings
from docurag.embeddings import EmbeddingModel
from docurag.knowledge_store import KnowledgeStore
from docurag.rag import RAGClient

DIMENSION = 64

STOPWORDS = {"a", "an", "and", "are", "is", "of", "the", "to", "what", "which", "who", "in", "on"}


class KeywordEmbeddings(Embeddings):
    """Bag-of-words vectors hashed into fixed buckets; shared keywords mean high similarity."""

    def __init__(self, size: int = DIMENSION):
        self.size = size

    def _embed(self, text: str) -> List[float]:
        vector = [0.0] * self.size
        tokens = [t for t in re.findall(r"[a-z0-9]+", text.lower()) if t not in STOPWORDS]
        for token in tokens:
            bucket = int(hashlib.md5(token.encode()).hexdigest(), 16) % self.size
            vector[bucket] += 1.0
        if not tokens:
            vector[0] = 1.0
        return vector

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        return [self._embed(t) for t in texts]

    def embed_query(self, text: str) -> List[float]:
        return self._embed(text)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        embedding_dimension=DIMENSION,
        qdrant_collection="test-docs",
        search_limit=5,
        search_score_threshold=0.0,
        log_level="WARNING",
    )


@pytest.fixture
def embedder() -> EmbeddingModel:
    return EmbeddingModel(KeywordEmbeddings(), DIMENSION)


@pytest.fixture
async def store(embedder):
    store = KnowledgeStore(
        AsyncQdrantClient(location=":memory:"),
        embedder,
        collection_name="test-docs",
        chunk_max_chars=200,
    )
    yield store
    await store.close()


@pytest.fixture
def chat_model():
    return FakeListChatModel(responses=["Paris is the capital of France."])


@pytest.fixture
def rag(store, chat_model) -> RAGClient:
    return RAGClient(store, chat_model)
