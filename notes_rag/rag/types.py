from __future__ import annotations

"""Core data types for documents, retrieval and synthesis."""

from dataclasses import dataclass, field
from typing import Any

Document = str
EmbeddingVector = list[float]

NO_RESPONSE = "No response generated"


@dataclass(frozen=True)
class ScoredDocument:
    """Document paired with its similarity to the query."""
    document: Document
    score: float
    position: int


@dataclass(frozen=True)
class RetrievalResult:
    """Top ranked documents, best first."""
    matches: tuple[ScoredDocument, ...] = ()

    @property
    def documents(self) -> list[Document]:
        return [match.document for match in self.matches]

    def __len__(self) -> int:
        return len(self.matches)


@dataclass(frozen=True)
class SynthesisRequest:
    """Single-turn generation request built from a query and its context."""
    query: str
    context: tuple[Document, ...]
    model: str

    @property
    def prompt(self) -> str:
        context_block = "\n".join(self.context)
        return f"Context:\n{context_block}\n\nQuestion: {self.query}\nAnswer:"

    def messages(self) -> list[dict[str, Any]]:
        return [{"role": "user", "content": self.prompt}]


@dataclass(frozen=True)
class RAGResponse:
    answer: str
    model: str
    sources: RetrievalResult = field(default_factory=RetrievalResult)
