from __future__ import annotations

"""Completion providers and grounded answer synthesis."""

from dataclasses import dataclass
import logging
from typing import Any, Protocol, Sequence

import httpx

from notes_rag.rag.errors import ProviderError
from notes_rag.rag.types import NO_RESPONSE, Document, SynthesisRequest


class LLMError(ProviderError):
    """Raised when LLM requests fail or responses are invalid."""
    pass


class LLMConfigError(RuntimeError):
    """Raised when completion configuration is invalid."""
    pass


logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    """Protocol for chat completion providers."""

    async def create_completion(
        self, model: str, messages: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Return a payload shaped like ``{"choices": [{"message": {"content": ...}}]}``."""
        raise NotImplementedError


@dataclass(frozen=True)
class OpenAICompletionProvider:
    """Completion provider backed by OpenAI chat completions."""
    api_key: str
    base_url: str = "https://api.openai.com/v1"
    timeout: float = 60.0
    transport: httpx.AsyncBaseTransport | None = None

    async def create_completion(
        self, model: str, messages: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Send the messages to ``/chat/completions`` and return the decoded body."""
        payload = {"model": model, "messages": messages}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url.rstrip('/')}/chat/completions",
                    json=payload,
                    headers=headers,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise LLMError(str(exc)) from exc
        except ValueError as exc:
            raise LLMError("Invalid OpenAI response body") from exc
        if not isinstance(data, dict):
            raise LLMError("Invalid OpenAI response")
        return data


def build_prompt(query: str, context: Sequence[Document]) -> str:
    """Return the grounded prompt sent to the model."""
    return SynthesisRequest(query=query, context=tuple(context), model="").prompt


def extract_content(data: dict[str, Any]) -> str | None:
    """Return the first choice's message content, or None when there is none."""
    choices = data.get("choices") or []
    if not choices:
        return None
    if not isinstance(choices, list) or not isinstance(choices[0], dict):
        raise LLMError("Invalid OpenAI response")
    message = choices[0].get("message") or {}
    if not isinstance(message, dict):
        raise LLMError("Invalid OpenAI response")
    content = message.get("content")
    if content is not None and not isinstance(content, str):
        raise LLMError("Invalid OpenAI response content")
    return content


@dataclass(frozen=True)
class AnswerSynthesizer:
    """Answer a query from retrieved context with a single completion call."""
    provider: CompletionProvider

    async def synthesize(self, query: str, context: Sequence[Document], model: str) -> str:
        request = SynthesisRequest(query=query, context=tuple(context), model=model)
        data = await self.provider.create_completion(request.model, request.messages())
        content = extract_content(data)
        if content is None:
            logger.warning("llm_empty_response", extra={"model": model})
            return NO_RESPONSE
        logger.info(
            "synthesis_complete",
            extra={
                "model": model,
                "context_documents": len(request.context),
                "prompt_length": len(request.prompt),
                "answer_length": len(content),
            },
        )
        return content
