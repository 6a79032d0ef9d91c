"""Liveness endpoint with operation counters."""

from fastapi import APIRouter, Depends

from docurag.rag import RAGClient
from docurag.routes.deps import get_rag_client

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(rag: RAGClient = Depends(get_rag_client)):
    return {"status": "ok", "metrics": rag.metrics.get_stats()}
