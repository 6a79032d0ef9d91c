"""Server-rendered upload/ask page backed by a per-session RagPage."""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from docurag.page import PageSessions, StatusState
from docurag.routes.deps import get_sessions

SESSION_COOKIE = "docurag_session"

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter(tags=["page"])


async def get_page(request: Request, sessions: PageSessions = Depends(get_sessions)):
    return sessions.get(request.cookies.get(SESSION_COOKIE))


def _back_to_page(session_id: str) -> RedirectResponse:
    response = RedirectResponse(url="/rag", status_code=303)
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


@router.get("/rag")
async def show_page(request: Request, session=Depends(get_page)):
    session_id, page = session
    response = templates.TemplateResponse(
        request,
        "rag.html",
        {"page": page, "StatusState": StatusState},
    )
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


@router.post("/rag/file")
async def choose_file(file: Optional[UploadFile] = File(None), session=Depends(get_page)):
    session_id, page = session
    if file is None or not file.filename:
        await page.load_file(None, None)
    else:
        await page.load_file(file.filename, file.read)
    return _back_to_page(session_id)


@router.post("/rag/upload")
async def upload(markdown_text: str = Form(""), session=Depends(get_page)):
    session_id, page = session
    page.edit_markdown(markdown_text)
    await page.upload()
    return _back_to_page(session_id)


@router.post("/rag/ask")
async def ask(question: str = Form(""), session=Depends(get_page)):
    session_id, page = session
    await page.ask(question)
    return _back_to_page(session_id)


@router.post("/rag/clear")
async def clear(session=Depends(get_page)):
    session_id, page = session
    page.clear()
    return _back_to_page(session_id)
