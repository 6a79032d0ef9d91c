"""Shared builders for test data."""

from docurag.rag import SearchOutcome, SearchUsage


def empty_outcome() -> SearchOutcome:
    return SearchOutcome(results=[], text="", entries=[], usage=SearchUsage(embedding_requests=1, query_characters=0))
