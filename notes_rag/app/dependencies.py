from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from notes_rag.app.settings import settings
from notes_rag.loaders.vault import MarkdownVault
from notes_rag.rag.embeddings import (
    EmbeddingClient,
    EmbeddingConfigError,
    EmbeddingProvider,
    HashEmbeddingProvider,
    OpenAIEmbeddingProvider,
)
from notes_rag.rag.llm import AnswerSynthesizer, CompletionProvider, LLMConfigError, OpenAICompletionProvider
from notes_rag.rag.pipeline import QAPipeline
from notes_rag.rag.retriever import Retriever


@lru_cache
def get_pipeline() -> QAPipeline:
    retriever = Retriever(
        embedder=EmbeddingClient(provider=build_embedding_provider()),
        max_concurrency=settings.embed_concurrency,
    )
    synthesizer = AnswerSynthesizer(provider=build_completion_provider())
    return QAPipeline(
        retriever=retriever,
        synthesizer=synthesizer,
        timeout=settings.query_timeout or None,
    )


def reset_pipeline_cache() -> None:
    get_pipeline.cache_clear()


def get_vault() -> MarkdownVault:
    return MarkdownVault(root=Path(settings.notes_dir))


def build_embedding_provider() -> EmbeddingProvider:
    provider = settings.embedding_provider
    if provider == "hash":
        return HashEmbeddingProvider(dimension=settings.embedding_dimension)
    if provider == "openai":
        return OpenAIEmbeddingProvider(
            api_key=settings.api_key or "",
            timeout=settings.openai_timeout,
        )
    raise EmbeddingConfigError(f"Unsupported embedding provider: {provider}")


def build_completion_provider() -> CompletionProvider:
    if not settings.api_key:
        raise LLMConfigError("OPENAI_API_KEY is required for answer generation")
    return OpenAICompletionProvider(
        api_key=settings.api_key,
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout,
    )
