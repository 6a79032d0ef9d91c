"""Sentence-boundary aware chunking with deterministic IDs for stable chunk identity."""

import re
import uuid
from typing import Dict, List

import spacy

nlp = spacy.blank("en")
nlp.add_pipe("sentencizer")

NAMESPACE_DOCURAG = uuid.UUID("6ba7b810-9dad-11d1-80b4-00c04fd430c8")

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def generate_chunk_id(entry_id: str, order: int) -> str:
    return str(uuid.uuid5(NAMESPACE_DOCURAG, f"{entry_id}:{order}"))


def split_sentences(text: str) -> List[str]:
    sentences: List[str] = []
    for paragraph in _PARAGRAPH_BREAK.split(text):
        paragraph = paragraph.strip()
        if not paragraph:
            continue
        doc = nlp(paragraph)
        sentences.extend(sent.text.strip() for sent in doc.sents if sent.text.strip())
    return sentences


def chunk_text(
    text: str,
    *,
    entry_id: str,
    max_chars: int = 1000,
    overlap_sentences: int = 1,
) -> List[Dict]:
    sentences = split_sentences(text)

    if not sentences:
        return []

    chunks = []
    current_chunk: List[str] = []
    current_length = 0
    # Overlap carried from the previous chunk alone must never be emitted again.
    has_new_sentences = False

    def flush():
        order = len(chunks)
        chunks.append({
            "id": generate_chunk_id(entry_id, order),
            "order": order,
            "text": " ".join(current_chunk),
        })

    for sent in sentences:
        if current_length + len(sent) > max_chars and current_chunk:
            if has_new_sentences:
                flush()
                current_chunk = current_chunk[-overlap_sentences:] if overlap_sentences else []
            else:
                current_chunk = []
            current_length = sum(len(s) for s in current_chunk)
            has_new_sentences = False

        current_chunk.append(sent)
        current_length += len(sent)
        has_new_sentences = True

    if current_chunk and has_new_sentences:
        flush()

    return chunks
