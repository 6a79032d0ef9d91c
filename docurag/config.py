"""Environment-supplied configuration."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # Model serving (Ollama)
    ollama_base_url: str = "http://localhost:11434"
    embedding_model: str = "nomic-embed-text"
    # Must match the embedding model; changing it invalidates stored vectors.
    embedding_dimension: int = Field(default=768, gt=0)
    chat_model: str = "gemma3:4b"

    # Knowledge store (Qdrant)
    qdrant_url: str = ":memory:"
    qdrant_collection: str = "docurag"
    namespace: str = Field(default="global", validation_alias="RAG_NAMESPACE")

    # Retrieval
    search_limit: int = Field(default=10, gt=0)
    search_score_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    chunk_max_chars: int = Field(default=1000, gt=0)

    # App
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


def load_settings() -> Settings:
    return Settings()


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
