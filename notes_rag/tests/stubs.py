from __future__ import annotations

"""In-process provider doubles that record every call."""

import asyncio
from typing import Any

from notes_rag.rag.errors import ProviderError


class StubEmbeddingProvider:
    """Return canned vectors and count calls."""

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        default: list[float] | None = None,
        fail_on: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.vectors = vectors or {}
        self.default = default or [0.0, 0.0, 1.0]
        self.fail_on = fail_on or set()
        self.delays = delays or {}
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def create_embedding(self, model: str, text: str) -> list[float]:
        self.calls.append((model, text))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(text, 0))
            if text in self.fail_on:
                raise ProviderError(f"embedding failed for {text!r}")
            return list(self.vectors.get(text, self.default))
        finally:
            self.in_flight -= 1


class StubCompletionProvider:
    """Return a fixed chat completion payload and record requests."""

    def __init__(
        self,
        content: str | None = "ok",
        payload: dict[str, Any] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.content = content
        self.payload = payload
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, list[dict[str, Any]]]] = []

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][1][0]["content"]

    async def create_completion(self, model: str, messages: list[dict[str, Any]]) -> dict[str, Any]:
        self.calls.append((model, messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.payload is not None:
            return self.payload
        return {"choices": [{"message": {"role": "assistant", "content": self.content}}]}
