from __future__ import annotations

"""Shared pytest fixtures and test environment defaults."""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["EMBEDDING_PROVIDER"] = "hash"
os.environ["EMBEDDING_DIMENSION"] = "256"
os.environ.pop("OPENAI_API_KEY", None)
os.environ.pop("RAG_SELECTED_MODEL", None)
os.environ.setdefault("RAG_QUERY_TIMEOUT", "0")

from notes_rag.tests.stubs import StubCompletionProvider, StubEmbeddingProvider  # noqa: E402


@pytest.fixture
def paris_corpus() -> list[str]:
    return [
        "Paris is the capital of France.",
        "The Eiffel Tower is in Paris.",
        "Bananas are yellow.",
    ]


@pytest.fixture
def paris_embeddings() -> StubEmbeddingProvider:
    return StubEmbeddingProvider(
        vectors={
            "What is the capital of France?": [1.0, 0.0, 0.0],
            "Paris is the capital of France.": [0.9, 0.1, 0.0],
            "The Eiffel Tower is in Paris.": [0.6, 0.4, 0.0],
            "Bananas are yellow.": [0.0, 0.1, 1.0],
        }
    )


@pytest.fixture
def completion_stub() -> StubCompletionProvider:
    return StubCompletionProvider(content="Paris.")


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
