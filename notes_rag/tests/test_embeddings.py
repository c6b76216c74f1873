from __future__ import annotations

import math
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from notes_rag.rag.embeddings import (
    EMBEDDING_MODEL,
    EmbeddingClient,
    EmbeddingConfigError,
    EmbeddingError,
    HashEmbeddingProvider,
    OpenAIEmbeddingProvider,
)
from notes_rag.rag.errors import ProviderError
from notes_rag.tests.stubs import StubEmbeddingProvider

pytestmark = pytest.mark.anyio


async def test_embed_uses_fixed_model_and_one_call_per_text() -> None:
    provider = StubEmbeddingProvider(default=[0.5, 0.5])
    client = EmbeddingClient(provider=provider)

    first = await client.embed("same text")
    second = await client.embed("same text")

    assert first == second == [0.5, 0.5]
    assert provider.calls == [(EMBEDDING_MODEL, "same text"), (EMBEDDING_MODEL, "same text")]


async def test_empty_text_is_passed_through() -> None:
    provider = StubEmbeddingProvider()
    await EmbeddingClient(provider=provider).embed("")
    assert provider.calls == [(EMBEDDING_MODEL, "")]


async def test_provider_failure_propagates() -> None:
    provider = StubEmbeddingProvider(fail_on={"boom"})
    with pytest.raises(ProviderError):
        await EmbeddingClient(provider=provider).embed("boom")
    assert len(provider.calls) == 1


async def test_non_finite_vector_is_rejected() -> None:
    provider = StubEmbeddingProvider(vectors={"bad": [1.0, math.nan]})
    with pytest.raises(EmbeddingError):
        await EmbeddingClient(provider=provider).embed("bad")


async def test_hash_provider_is_deterministic_and_normalized() -> None:
    provider = HashEmbeddingProvider(dimension=64)

    first = await provider.create_embedding(EMBEDDING_MODEL, "Paris is the capital of France.")
    second = await provider.create_embedding(EMBEDDING_MODEL, "Paris is the capital of France.")

    assert first == second
    assert len(first) == 64
    assert math.isclose(math.sqrt(sum(value * value for value in first)), 1.0)


async def test_hash_provider_returns_zero_vector_without_tokens() -> None:
    vector = await HashEmbeddingProvider(dimension=8).create_embedding(EMBEDDING_MODEL, "...")
    assert vector == [0.0] * 8


def test_hash_provider_rejects_invalid_dimension() -> None:
    with pytest.raises(EmbeddingConfigError):
        HashEmbeddingProvider(dimension=0)


def test_openai_provider_requires_api_key() -> None:
    with pytest.raises(EmbeddingConfigError):
        OpenAIEmbeddingProvider(api_key="")


async def test_openai_provider_reads_first_embedding() -> None:
    provider = OpenAIEmbeddingProvider(api_key="sk-test")
    requests: list[dict[str, str]] = []

    async def create(**kwargs):
        requests.append(kwargs)
        return SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2, 0.3])])

    provider.client = SimpleNamespace(embeddings=SimpleNamespace(create=create))

    vector = await provider.create_embedding(EMBEDDING_MODEL, "hello")

    assert vector == [0.1, 0.2, 0.3]
    assert requests == [{"model": EMBEDDING_MODEL, "input": "hello"}]


async def test_openai_provider_wraps_sdk_errors() -> None:
    provider = OpenAIEmbeddingProvider(api_key="sk-test")

    async def create(**kwargs):
        raise OpenAIError("rate limited")

    provider.client = SimpleNamespace(embeddings=SimpleNamespace(create=create))

    with pytest.raises(EmbeddingError) as excinfo:
        await provider.create_embedding(EMBEDDING_MODEL, "hello")
    assert isinstance(excinfo.value.__cause__, OpenAIError)
