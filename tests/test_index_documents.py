"""Tests for loading Markdown files from disk and bulk indexing them."""

import pytest

from docurag.index_documents import build_parser, index_paths
from docurag.ingest import iter_markdown_paths, load_markdown_documents


@pytest.fixture
def docs_dir(tmp_path):
    (tmp_path / "france.md").write_text("Paris is the capital of France.", encoding="utf-8")
    nested = tmp_path / "europe"
    nested.mkdir()
    (nested / "italy.markdown").write_text("Rome is the capital of Italy.", encoding="utf-8")
    (nested / "empty.txt").write_text("   ", encoding="utf-8")
    (nested / "image.png").write_bytes(b"\x89PNG")
    return tmp_path


def test_directories_are_scanned_for_markdown(docs_dir):
    paths = iter_markdown_paths([docs_dir])

    assert sorted(p.name for p in paths) == ["empty.txt", "france.md", "italy.markdown"]


def test_missing_path_is_an_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        iter_markdown_paths([tmp_path / "missing.md"])


def test_empty_files_are_skipped(docs_dir):
    documents = load_markdown_documents([docs_dir])

    assert sorted(d.source for d in documents) == ["france.md", "italy.markdown"]


async def test_index_paths_ingests_every_document(rag, docs_dir):
    indexed = await index_paths(rag, [docs_dir], "europe")

    outcome = await rag.search("europe", "capital of Italy", limit=1, score_threshold=0.0)
    assert indexed == 2
    assert outcome.results[0].source == "italy.markdown"


def test_parser_accepts_namespace():
    args = build_parser().parse_args(["docs", "--namespace", "team"])

    assert args.namespace == "team"
    assert [str(p) for p in args.paths] == ["docs"]
