from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_MODELS = ("gpt-4", "gpt-4-turbo", "gpt-3.5-turbo")
DEFAULT_MODEL = "gpt-4-turbo"


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_timeout: float = float(os.getenv("OPENAI_TIMEOUT", "60"))
    selected_model_raw: str = os.getenv("RAG_SELECTED_MODEL", DEFAULT_MODEL)
    embedding_provider_raw: str = os.getenv("EMBEDDING_PROVIDER", "openai")
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "256"))
    embed_concurrency: int = int(os.getenv("RAG_EMBED_CONCURRENCY", "8"))
    query_timeout: float = float(os.getenv("RAG_QUERY_TIMEOUT", "0"))
    notes_dir_raw: str = os.getenv("RAG_NOTES_DIR", "notes")
    metrics_enabled: bool = os.getenv("RAG_METRICS_ENABLED", "true").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def selected_model(self) -> str:
        value = os.getenv("RAG_SELECTED_MODEL", self.selected_model_raw).strip()
        if value not in SUPPORTED_MODELS:
            return DEFAULT_MODEL
        return value

    @property
    def embedding_provider(self) -> str:
        return os.getenv("EMBEDDING_PROVIDER", self.embedding_provider_raw).strip().lower()

    @property
    def api_key(self) -> str | None:
        return os.getenv("OPENAI_API_KEY", self.openai_api_key or "") or None

    @property
    def notes_dir(self) -> str:
        return os.getenv("RAG_NOTES_DIR", self.notes_dir_raw)


settings = Settings()
