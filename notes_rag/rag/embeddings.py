from __future__ import annotations

"""Embedding providers and the client that wraps them."""

import hashlib
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Protocol

from openai import AsyncOpenAI, OpenAIError

from notes_rag.rag.errors import ProviderError
from notes_rag.rag.types import EmbeddingVector

EMBEDDING_MODEL = "text-embedding-ada-002"

_TOKEN_RE = re.compile(r"[a-z0-9]+")

logger = logging.getLogger(__name__)


class EmbeddingError(ProviderError):
    """Raised when embeddings fail or are invalid."""
    pass


class EmbeddingConfigError(RuntimeError):
    """Raised when embedding configuration is invalid."""
    pass


class EmbeddingProvider(Protocol):
    """Protocol for embedding providers."""

    async def create_embedding(self, model: str, text: str) -> EmbeddingVector:
        """Return an embedding vector for the provided text."""
        raise NotImplementedError


def validate_vector(vector: list[Any]) -> EmbeddingVector:
    """Ensure every component is a finite number."""
    cleaned: EmbeddingVector = []
    for value in vector:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EmbeddingError("Embedding contains a non-numeric value")
        if not math.isfinite(value):
            raise EmbeddingError("Embedding contains a non-finite value")
        cleaned.append(float(value))
    return cleaned


@dataclass
class HashEmbeddingProvider:
    """Deterministic hash-based embedder for testing or offline use."""
    dimension: int = 256

    def __post_init__(self) -> None:
        if self.dimension <= 0:
            raise EmbeddingConfigError("EMBEDDING_DIMENSION must be greater than zero")

    async def create_embedding(self, model: str, text: str) -> EmbeddingVector:
        """Embed text using token hashing and L2 normalization."""
        vector = [0.0] * self.dimension
        for token in _TOKEN_RE.findall(text.lower()):
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            vector[digest[0] % self.dimension] += 1.0
        return self._l2_normalize(vector)

    def _l2_normalize(self, vector: list[float]) -> list[float]:
        """Normalize vector magnitude to 1.0."""
        norm = math.sqrt(sum(value * value for value in vector))
        if norm == 0.0:
            return vector
        return [value / norm for value in vector]


@dataclass
class OpenAIEmbeddingProvider:
    """Embedding provider using the OpenAI embeddings API."""
    api_key: str
    timeout: float = 60.0
    client: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.api_key:
            raise EmbeddingConfigError("OPENAI_API_KEY is required for OpenAI embeddings")
        self.client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    async def create_embedding(self, model: str, text: str) -> EmbeddingVector:
        """Embed text using the OpenAI embeddings API."""
        try:
            response = await self.client.embeddings.create(model=model, input=text)
        except OpenAIError as exc:
            raise EmbeddingError(str(exc)) from exc
        if not response.data:
            raise EmbeddingError("OpenAI embedding response missing embedding vector")
        return list(response.data[0].embedding)


@dataclass(frozen=True)
class EmbeddingClient:
    """Turn text into vectors with one provider call per text."""
    provider: EmbeddingProvider
    model: str = EMBEDDING_MODEL

    async def embed(self, text: str) -> EmbeddingVector:
        try:
            vector = await self.provider.create_embedding(self.model, text)
        except Exception as exc:
            logger.warning(
                "embedding_failed",
                extra={"model": self.model, "detail": type(exc).__name__},
            )
            raise
        return validate_vector(vector)
