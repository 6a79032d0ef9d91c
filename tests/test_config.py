"""Tests for environment configuration and logging helpers."""

import logging

import pytest
from pydantic import ValidationError

from docurag.config import load_settings
from docurag.logging_config import OperationMetrics, log_latency

ENV_VARS = [
    "OLLAMA_BASE_URL",
    "EMBEDDING_MODEL",
    "EMBEDDING_DIMENSION",
    "CHAT_MODEL",
    "QDRANT_URL",
    "QDRANT_COLLECTION",
    "RAG_NAMESPACE",
    "SEARCH_LIMIT",
    "SEARCH_SCORE_THRESHOLD",
    "CHUNK_MAX_CHARS",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()

    assert settings.embedding_model == "nomic-embed-text"
    assert settings.embedding_dimension == 768
    assert settings.chat_model == "gemma3:4b"
    assert settings.namespace == "global"
    assert settings.search_limit == 10
    assert settings.search_score_threshold == 0.5


def test_environment_overrides(clean_env):
    clean_env.setenv("OLLAMA_BASE_URL", "http://host.docker.internal:11434")
    clean_env.setenv("EMBEDDING_DIMENSION", "1024")
    clean_env.setenv("RAG_NAMESPACE", "team-docs")
    clean_env.setenv("SEARCH_SCORE_THRESHOLD", "0.25")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.ollama_base_url == "http://host.docker.internal:11434"
    assert settings.embedding_dimension == 1024
    assert settings.namespace == "team-docs"
    assert settings.search_score_threshold == 0.25
    assert settings.log_level == "DEBUG"


def test_invalid_number_is_rejected(clean_env):
    clean_env.setenv("EMBEDDING_DIMENSION", "seven hundred")

    with pytest.raises(ValidationError, match="embedding_dimension"):
        load_settings()


def test_out_of_range_threshold_is_rejected(clean_env):
    clean_env.setenv("SEARCH_SCORE_THRESHOLD", "1.5")

    with pytest.raises(ValidationError, match="search_score_threshold"):
        load_settings()


def test_env_file_is_read(clean_env, tmp_path):
    (tmp_path / ".env").write_text("RAG_NAMESPACE=from-file\nSEARCH_LIMIT=3\n", encoding="utf-8")

    settings = load_settings()

    assert settings.namespace == "from-file"
    assert settings.search_limit == 3


class Service:
    def __init__(self):
        self.metrics = OperationMetrics()

    @log_latency("service.work")
    async def work(self, fail: bool = False):
        if fail:
            raise RuntimeError("boom")
        return "done"


async def test_log_latency_records_into_instance_metrics(caplog):
    service = Service()

    with caplog.at_level(logging.INFO):
        assert await service.work() == "done"
        with pytest.raises(RuntimeError):
            await service.work(fail=True)

    stats = service.metrics.get_stats()["operations"]["service.work"]
    assert stats["calls"] == 2
    assert stats["successes"] == 1
    assert stats["failures"] == 1
    assert "service.work | latency_ms=" in caplog.text
    assert "status=error" in caplog.text
