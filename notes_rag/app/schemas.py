from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ModelName = Literal["gpt-4", "gpt-4-turbo", "gpt-3.5-turbo"]


class QueryRequest(BaseModel):
    query: str
    model: ModelName | None = None
    documents: list[str] | None = None


class SourceDocument(BaseModel):
    content: str
    score: float
    position: int


class QueryResponse(BaseModel):
    answer: str
    model: str
    sources: list[SourceDocument]
    request_id: str


class ModelsResponse(BaseModel):
    models: list[str]
    default: str = Field(description="Model used when a query does not name one")
