"""Loading Markdown documents from disk."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from docurag.errors import FileReadError

MARKDOWN_SUFFIXES = {".md", ".markdown", ".txt"}


@dataclass
class MarkdownDocument:
    path: Path
    text: str

    @property
    def source(self) -> str:
        return self.path.name


def iter_markdown_paths(paths: Iterable[Path]) -> List[Path]:
    found: List[Path] = []
    for path in paths:
        if path.is_dir():
            found.extend(
                p for p in sorted(path.rglob("*"))
                if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES
            )
        elif path.exists():
            found.append(path)
        else:
            raise FileNotFoundError(f"Document not found: {path}")
    return found


def load_markdown_document(path: Path) -> MarkdownDocument:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Failed to read {path}", cause=e) from e
    return MarkdownDocument(path=path, text=text)


def load_markdown_documents(paths: Iterable[Path]) -> List[MarkdownDocument]:
    documents = []
    for path in iter_markdown_paths(paths):
        document = load_markdown_document(path)
        if not document.text.strip():
            print(f"Skipping empty file: {path}")
            continue
        documents.append(document)
    return documents
