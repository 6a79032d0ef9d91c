"""Embedding abstraction with L2 normalization for consistent similarity scoring."""

from typing import List, Optional

import numpy as np
from langchain_core.embeddings import Embeddings
from langchain_ollama import OllamaEmbeddings


class EmbeddingModel:
    def __init__(self, embeddings: Embeddings, dimension: int):
        self.embeddings = embeddings
        self.dimension = dimension

    @classmethod
    def from_ollama(cls, *, base_url: str, model_name: str, dimension: int) -> "EmbeddingModel":
        return cls(OllamaEmbeddings(model=model_name, base_url=base_url), dimension)

    def _prepare(self, vectors: List[List[float]], normalize: bool) -> np.ndarray:
        embeddings = np.asarray(vectors, dtype=np.float32)
        if embeddings.ndim != 2 or embeddings.shape[1] != self.dimension:
            got: Optional[int] = embeddings.shape[1] if embeddings.ndim == 2 else None
            raise ValueError(
                f"Embedding dimension mismatch: expected {self.dimension}, got {got}"
            )
        if normalize:
            norms = np.linalg.norm(embeddings, axis=1, keepdims=True)
            norms = np.where(norms == 0, 1, norms)
            embeddings = embeddings / norms
        return embeddings

    async def embed_documents(self, texts: List[str], normalize: bool = True) -> np.ndarray:
        vectors = await self.embeddings.aembed_documents(texts)
        return self._prepare(vectors, normalize)

    async def embed_query(self, text: str, normalize: bool = True) -> np.ndarray:
        vector = await self.embeddings.aembed_query(text)
        return self._prepare([vector], normalize)[0]
