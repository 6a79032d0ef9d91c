"""FastAPI application entrypoint with RAG client lifecycle management."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from docurag.config import Settings, get_settings
from docurag.errors import FileReadError, RagError, ValidationError
from docurag.logging_config import setup_logging
from docurag.page import PageSessions, RagPage
from docurag.rag import RAGClient
from docurag.routes import actions_router, health_router, page_router

logger = logging.getLogger(__name__)


def _install_state(app: FastAPI, settings: Settings, rag: RAGClient):
    app.state.rag = rag
    app.state.sessions = PageSessions(
        lambda: RagPage(rag, namespace=settings.namespace, limit=settings.search_limit)
    )


def create_app(settings: Optional[Settings] = None, rag: Optional[RAGClient] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_client = getattr(app.state, "rag", None) is None
        if owns_client:
            _install_state(app, settings, RAGClient.from_settings(settings))
        yield
        if owns_client:
            await app.state.rag.close()

    app = FastAPI(title="DocuRAG", lifespan=lifespan)
    app.state.settings = settings
    if rag is not None:
        _install_state(app, settings, rag)

    @app.exception_handler(RagError)
    async def rag_error_handler(request: Request, exc: RagError):
        if isinstance(exc, ValidationError):
            status_code = 422
        elif isinstance(exc, FileReadError):
            status_code = 400
        else:
            status_code = 502
        logger.error(f"Request failed | path={request.url.path} | error={exc}")
        return JSONResponse(status_code=status_code, content={"detail": exc.message, "error": exc.kind})

    app.include_router(health_router)
    app.include_router(actions_router)
    app.include_router(page_router)

    @app.get("/")
    async def root():
        return RedirectResponse(url="/rag")

    return app


app = create_app()
