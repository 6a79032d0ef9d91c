"""View state for the upload/ask page.

Each browser session owns one ``RagPage``. Upload and ask are independent
actions, each with an ``ActionStatus`` moving idle -> in_progress ->
success | error. Only one upload and one ask run at a time. Every ask takes
a request token when it starts; an answer that comes back after a newer ask
(or a ``clear()``) has been issued is dropped instead of overwriting the
newer state.
"""

import json
import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple, Union

from docurag.errors import FileReadError, RagError
from docurag.rag import RAGClient

logger = logging.getLogger(__name__)

FILE_READ_FAILED = "Failed to read file. Please try another file."
NOTHING_TO_UPLOAD = "No Markdown content to upload."
UPLOAD_FAILED = "Upload failed. Check the server logs for details."
ASK_FAILED = "Failed to fetch answer. Check the server logs for details."
NO_ANSWER = "No answer returned."


class StatusState(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ActionStatus:
    state: StatusState
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "ActionStatus":
        return cls(StatusState.IDLE)

    @classmethod
    def in_progress(cls) -> "ActionStatus":
        return cls(StatusState.IN_PROGRESS)

    @classmethod
    def success(cls, message: str) -> "ActionStatus":
        return cls(StatusState.SUCCESS, message)

    @classmethod
    def error(cls, message: str) -> "ActionStatus":
        return cls(StatusState.ERROR, message)


FileReader = Callable[[], Awaitable[Union[bytes, str]]]


async def read_text(read: FileReader) -> str:
    try:
        content = await read()
        if isinstance(content, bytes):
            content = content.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError("Failed to read file as text", cause=e) from e
    return content


class RagPage:
    def __init__(self, client: RAGClient, *, namespace: str, limit: int = 10):
        self.client = client
        self.namespace = namespace
        self.limit = limit

        self.selected_file_name: Optional[str] = None
        self.markdown_text = ""
        self.upload_status = ActionStatus.idle()

        self.question = ""
        self.ask_status = ActionStatus.idle()
        self.answer: Optional[str] = None
        self.context_json: Optional[str] = None

        self._uploading = False
        self._ask_token = 0

    @property
    def is_uploading(self) -> bool:
        return self._uploading

    @property
    def is_asking(self) -> bool:
        return self.ask_status.state is StatusState.IN_PROGRESS

    async def load_file(self, filename: Optional[str], read: Optional[FileReader]):
        if not filename or read is None:
            self.selected_file_name = None
            self.markdown_text = ""
            return

        try:
            text = await read_text(read)
        except FileReadError as e:
            logger.error(f"Failed to read file | filename={filename} | error={e}")
            self.upload_status = ActionStatus.error(FILE_READ_FAILED)
            return

        self.selected_file_name = filename
        self.markdown_text = text
        if not self._uploading:
            self.upload_status = ActionStatus.idle()

    def edit_markdown(self, text: str):
        self.markdown_text = text

    async def upload(self):
        if self.is_uploading:
            return
        if not self.markdown_text.strip():
            self.upload_status = ActionStatus.error(NOTHING_TO_UPLOAD)
            return

        text = self.markdown_text
        filename = self.selected_file_name
        self._uploading = True
        self.upload_status = ActionStatus.in_progress()

        try:
            await self.client.ingest(self.namespace, text, source=filename)
        except RagError as e:
            logger.error(f"Failed to upload Markdown | error={e}")
            self.upload_status = ActionStatus.error(UPLOAD_FAILED)
            return
        finally:
            self._uploading = False

        if filename:
            self.upload_status = ActionStatus.success(f"Uploaded {filename} into the knowledge base.")
        else:
            self.upload_status = ActionStatus.success("Uploaded Markdown text into the knowledge base.")

    async def ask(self, question: str):
        if self.is_asking:
            return
        self.question = question
        if not question.strip():
            return

        self._ask_token += 1
        token = self._ask_token
        self.answer = None
        self.context_json = None
        self.ask_status = ActionStatus.in_progress()

        try:
            response = await self.client.answer_question(self.namespace, question, limit=self.limit)
        except RagError as e:
            logger.error(f"Failed to ask question | error={e}")
            if token == self._ask_token:
                self.answer = ASK_FAILED
                self.ask_status = ActionStatus.error(ASK_FAILED)
            return

        if token != self._ask_token:
            logger.info(f"Discarding stale answer | token={token} | latest={self._ask_token}")
            return

        self.answer = response.answer or NO_ANSWER
        self.context_json = (
            json.dumps(response.context.to_dict(), indent=2) if response.context is not None else None
        )
        self.ask_status = ActionStatus.success("Answer ready.")

    def clear(self):
        self._ask_token += 1
        self.question = ""
        self.answer = None
        self.context_json = None
        self.ask_status = ActionStatus.idle()


class PageSessions:
    """In-process map of browser session id to its page state."""

    def __init__(self, factory: Callable[[], RagPage], max_sessions: int = 1000):
        self.factory = factory
        self.max_sessions = max_sessions
        self._pages: "OrderedDict[str, RagPage]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._pages)

    def get(self, session_id: Optional[str]) -> Tuple[str, RagPage]:
        if session_id and session_id in self._pages:
            self._pages.move_to_end(session_id)
            return session_id, self._pages[session_id]

        session_id = uuid.uuid4().hex
        page = self.factory()
        self._pages[session_id] = page
        while len(self._pages) > self.max_sessions:
            self._pages.popitem(last=False)
        return session_id, page
