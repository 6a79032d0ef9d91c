"""Error taxonomy for the RAG client and the page that drives it."""

from typing import Optional


class RagError(Exception):
    """Base class for every error raised by docurag."""

    kind = "rag_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ValidationError(RagError):
    """Bad caller input, rejected before any external call."""

    kind = "validation_error"


class IngestError(RagError):
    """The knowledge store failed on the write path."""

    kind = "ingest_error"


class SearchError(RagError):
    """The knowledge store or embedding model failed on the read path."""

    kind = "search_error"


class GenerationError(RagError):
    """Retrieval worked but the chat model failed."""

    kind = "generation_error"


class FileReadError(RagError):
    """An uploaded file could not be read as text."""

    kind = "file_read_error"
