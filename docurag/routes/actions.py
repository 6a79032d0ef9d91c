"""JSON actions that forward to the RAG client and return its results unchanged."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from docurag.config import Settings
from docurag.rag import RAGClient
from docurag.routes.deps import get_rag_client, get_settings_dep

router = APIRouter(prefix="/api/rag", tags=["rag"])


class AddRequest(BaseModel):
    text: str
    source: Optional[str] = None
    namespace: Optional[str] = None


class SearchRequest(BaseModel):
    query: str
    limit: Optional[int] = None
    score_threshold: Optional[float] = Field(default=None)
    namespace: Optional[str] = None


class AskRequest(BaseModel):
    prompt: str
    limit: Optional[int] = None
    namespace: Optional[str] = None


@router.post("/add")
async def add(
    body: AddRequest,
    rag: RAGClient = Depends(get_rag_client),
    settings: Settings = Depends(get_settings_dep),
):
    await rag.ingest(body.namespace or settings.namespace, body.text, source=body.source)
    return {"status": "ok"}


@router.post("/search")
async def search(
    body: SearchRequest,
    rag: RAGClient = Depends(get_rag_client),
    settings: Settings = Depends(get_settings_dep),
):
    outcome = await rag.search(
        body.namespace or settings.namespace,
        body.query,
        limit=body.limit if body.limit is not None else settings.search_limit,
        score_threshold=(
            body.score_threshold if body.score_threshold is not None else settings.search_score_threshold
        ),
    )
    return outcome.to_dict()


@router.post("/ask")
async def ask(
    body: AskRequest,
    rag: RAGClient = Depends(get_rag_client),
    settings: Settings = Depends(get_settings_dep),
):
    answer = await rag.answer_question(
        body.namespace or settings.namespace,
        body.prompt,
        limit=body.limit if body.limit is not None else settings.search_limit,
    )
    return answer.to_dict()
