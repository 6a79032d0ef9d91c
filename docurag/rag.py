"""RAG client façade: ingest text, search a namespace, answer questions from retrieved context."""

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_ollama import ChatOllama
from qdrant_client import AsyncQdrantClient

from docurag.config import Settings
from docurag.embeddings import EmbeddingModel
from docurag.errors import GenerationError, IngestError, SearchError, ValidationError
from docurag.knowledge_store import KnowledgeStore, SearchHit
from docurag.logging_config import OperationMetrics, log_latency
from docurag.prompts import NO_CONTEXT, RAG_ANSWER_PROMPT

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = "\n\n---\n\n"


@dataclass(frozen=True)
class Entry:
    entry_id: str
    source: Optional[str]
    text: str


@dataclass(frozen=True)
class SearchUsage:
    embedding_requests: int
    query_characters: int


@dataclass(frozen=True)
class SearchOutcome:
    results: List[SearchHit]
    text: str
    entries: List[Entry]
    usage: SearchUsage

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Answer:
    answer: str
    context: SearchOutcome = field(repr=False)

    def to_dict(self) -> Dict:
        return {"answer": self.answer, "context": self.context.to_dict()}


def group_entries(hits: List[SearchHit]) -> List[Entry]:
    """Collapse hits into one entry per document, best-scoring document first."""
    grouped: Dict[str, List[SearchHit]] = {}
    for hit in hits:
        grouped.setdefault(hit.entry_id, []).append(hit)

    entries = []
    for entry_id, entry_hits in grouped.items():
        ordered = sorted(entry_hits, key=lambda h: h.order)
        entries.append(
            Entry(
                entry_id=entry_id,
                source=ordered[0].source,
                text="\n".join(h.text for h in ordered),
            )
        )
    return entries


def format_context(entries: List[Entry]) -> str:
    parts = []
    for entry in entries:
        if entry.source:
            parts.append(f"## {entry.source}:\n\n{entry.text}")
        else:
            parts.append(entry.text)
    return ENTRY_SEPARATOR.join(parts)


def _require_text(value: str, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string")
    return value


class RAGClient:
    def __init__(
        self,
        store: KnowledgeStore,
        chat_model: BaseChatModel,
        *,
        metrics: Optional[OperationMetrics] = None,
    ):
        self.store = store
        self.prompt = PromptTemplate.from_template(RAG_ANSWER_PROMPT)
        self.chain = self.prompt | chat_model | StrOutputParser()
        self.metrics = metrics or OperationMetrics()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RAGClient":
        embedder = EmbeddingModel.from_ollama(
            base_url=settings.ollama_base_url,
            model_name=settings.embedding_model,
            dimension=settings.embedding_dimension,
        )
        store = KnowledgeStore(
            AsyncQdrantClient(location=settings.qdrant_url),
            embedder,
            collection_name=settings.qdrant_collection,
            chunk_max_chars=settings.chunk_max_chars,
        )
        chat_model = ChatOllama(model=settings.chat_model, base_url=settings.ollama_base_url)
        logger.info(
            f"RAGClient configured | embedding_model={settings.embedding_model} "
            f"| chat_model={settings.chat_model} | qdrant={settings.qdrant_url}"
        )
        return cls(store, chat_model)

    async def close(self):
        await self.store.close()
        logger.info("RAGClient resources closed")

    @log_latency("rag.ingest")
    async def ingest(self, namespace: str, text: str, source: Optional[str] = None) -> None:
        _require_text(namespace, "namespace")
        _require_text(text, "text")

        try:
            ack = await self.store.write(namespace, text, source)
        except Exception as e:
            raise IngestError("Failed to add text to the knowledge base", cause=e) from e

        logger.info(f"Ingest complete | namespace={namespace} | entry_id={ack.entry_id} | chunks={ack.chunks}")

    @log_latency("rag.search")
    async def search(
        self,
        namespace: str,
        query: str,
        limit: int = 10,
        score_threshold: float = 0.5,
    ) -> SearchOutcome:
        _require_text(namespace, "namespace")
        _require_text(query, "query")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValidationError(f"limit must be a positive integer, got {limit!r}")
        if not isinstance(score_threshold, (int, float)) or not 0.0 <= score_threshold <= 1.0:
            raise ValidationError(f"score_threshold must be within [0, 1], got {score_threshold!r}")

        try:
            hits = await self.store.query(namespace, query, limit, score_threshold)
        except Exception as e:
            raise SearchError("Failed to search the knowledge base", cause=e) from e

        entries = group_entries(hits)
        usage = SearchUsage(embedding_requests=1, query_characters=len(query))
        self.metrics.record_usage(
            embedding_requests=usage.embedding_requests,
            query_characters=usage.query_characters,
        )
        logger.info(f"Retrieval complete | namespace={namespace} | results={len(hits)} | entries={len(entries)}")

        return SearchOutcome(
            results=hits,
            text=format_context(entries),
            entries=entries,
            usage=usage,
        )

    @log_latency("rag.answer_question")
    async def answer_question(self, namespace: str, prompt: str, limit: int = 10) -> Answer:
        _require_text(prompt, "prompt")
        logger.info(f"Question received | question_length={len(prompt)}")

        context = await self.search(namespace, prompt, limit=limit, score_threshold=0.0)
        if not context.results:
            logger.warning("No context retrieved, generating without it")

        try:
            answer = await self.chain.ainvoke({
                "context": context.text or NO_CONTEXT,
                "question": prompt,
            })
        except Exception as e:
            raise GenerationError("Failed to generate an answer", cause=e) from e

        answer = answer.strip()
        logger.info(f"LLM response received | answer_length={len(answer)}")
        return Answer(answer=answer, context=context)
