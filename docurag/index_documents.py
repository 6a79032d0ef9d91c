"""Bulk indexing: loads Markdown files from disk and ingests them into a namespace."""

import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from docurag.config import get_settings
from docurag.errors import RagError
from docurag.ingest import load_markdown_documents
from docurag.logging_config import setup_logging
from docurag.rag import RAGClient


async def index_paths(rag: RAGClient, paths: List[Path], namespace: str) -> int:
    documents = load_markdown_documents(paths)
    print(f"Loaded {len(documents)} document(s)")

    indexed = 0
    for document in documents:
        try:
            await rag.ingest(namespace, document.text, source=document.source)
        except RagError as e:
            print(f"Failed to index {document.path}: {e}")
            continue
        indexed += 1
        print(f"Indexed {indexed} / {len(documents)}: {document.path}")

    return indexed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ingest Markdown files into the knowledge base.")
    parser.add_argument("paths", nargs="+", type=Path, help="Files or directories to ingest")
    parser.add_argument("--namespace", default=None, help="Target namespace (defaults to RAG_NAMESPACE)")
    return parser


async def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)
    namespace = args.namespace or settings.namespace

    print(f"Starting document indexing into namespace '{namespace}'...")
    rag = RAGClient.from_settings(settings)
    try:
        indexed = await index_paths(rag, args.paths, namespace)
    finally:
        await rag.close()

    print(f"Indexed {indexed} document(s) into '{namespace}'")
    return indexed


def main(argv: Optional[List[str]] = None):
    logging.getLogger("httpx").setLevel(logging.WARNING)
    asyncio.run(run(argv))


if __name__ == "__main__":
    main()
