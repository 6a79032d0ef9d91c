"""Request-scoped accessors for objects created at application startup."""

from fastapi import Request

from docurag.config import Settings
from docurag.page import PageSessions
from docurag.rag import RAGClient


async def get_rag_client(request: Request) -> RAGClient:
    return request.app.state.rag


async def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


async def get_sessions(request: Request) -> PageSessions:
    return request.app.state.sessions
