"""Tests for sentence-boundary chunking."""

from docurag.chunker import chunk_text, generate_chunk_id, split_sentences


def test_short_text_is_a_single_chunk():
    chunks = chunk_text("Paris is the capital of France.", entry_id="entry-1")

    assert len(chunks) == 1
    assert chunks[0]["text"] == "Paris is the capital of France."
    assert chunks[0]["order"] == 0
    assert chunks[0]["id"] == generate_chunk_id("entry-1", 0)


def test_blank_text_has_no_chunks():
    assert chunk_text("  \n\n  ", entry_id="entry-1") == []


def test_paragraphs_are_split_separately():
    sentences = split_sentences("# Notes\n\nFirst point here.\n\nSecond point here.")

    assert "First point here." in sentences
    assert "Second point here." in sentences
    assert sentences[0].startswith("# Notes")


def test_long_text_is_split_with_ordered_unique_chunks():
    sentences = [f"Sentence number {i} is here." for i in range(10)]
    chunks = chunk_text(" ".join(sentences), entry_id="entry-1", max_chars=60, overlap_sentences=1)

    assert len(chunks) > 1
    assert [c["order"] for c in chunks] == list(range(len(chunks)))
    assert len({c["id"] for c in chunks}) == len(chunks)
    assert len({c["text"] for c in chunks}) == len(chunks)
    joined = " ".join(c["text"] for c in chunks)
    for sentence in sentences:
        assert sentence in joined


def test_chunk_ids_are_deterministic_per_entry():
    assert generate_chunk_id("a", 3) == generate_chunk_id("a", 3)
    assert generate_chunk_id("a", 3) != generate_chunk_id("b", 3)
