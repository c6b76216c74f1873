from __future__ import annotations

import asyncio
import hashlib
import logging
from dataclasses import dataclass
from typing import Awaitable, Sequence

from notes_rag.loaders.vault import CorpusSource, load_corpus
from notes_rag.rag.errors import InputError, QueryTimeoutError
from notes_rag.rag.llm import AnswerSynthesizer
from notes_rag.rag.retriever import Retriever
from notes_rag.rag.types import Document, RAGResponse

logger = logging.getLogger(__name__)


def validate_query(query: str) -> str:
    if not query:
        raise InputError("Please enter a question.")
    return query


@dataclass(frozen=True)
class QAPipeline:
    retriever: Retriever
    synthesizer: AnswerSynthesizer
    timeout: float | None = None

    async def answer_query(
        self,
        query: str,
        corpus: Sequence[Document],
        model: str,
        timeout: float | None = None,
    ) -> str:
        response = await self.run(query, corpus, model, timeout=timeout)
        return response.answer

    async def run(
        self,
        query: str,
        corpus: Sequence[Document],
        model: str,
        timeout: float | None = None,
    ) -> RAGResponse:
        validate_query(query)
        return await self._within_timeout(self._run(query, corpus, model), model, timeout)

    async def answer_from_source(
        self,
        query: str,
        source: CorpusSource,
        model: str,
        timeout: float | None = None,
    ) -> RAGResponse:
        validate_query(query)
        return await self._within_timeout(self._load_and_run(query, source, model), model, timeout)

    async def _within_timeout(
        self, work: Awaitable[RAGResponse], model: str, timeout: float | None
    ) -> RAGResponse:
        limit = self.timeout if timeout is None else timeout
        if not limit:
            return await work
        try:
            return await asyncio.wait_for(work, timeout=limit)
        except asyncio.TimeoutError as exc:
            logger.error("query_timeout", extra={"timeout": limit, "model": model})
            raise QueryTimeoutError(f"Query did not complete within {limit} seconds") from exc

    async def _load_and_run(self, query: str, source: CorpusSource, model: str) -> RAGResponse:
        corpus = await asyncio.to_thread(load_corpus, source)
        return await self._run(query, corpus, model)

    async def _run(self, query: str, corpus: Sequence[Document], model: str) -> RAGResponse:
        sources = await self.retriever.retrieve(query, corpus)
        answer = await self.synthesizer.synthesize(query, sources.documents, model)
        logger.info(
            "query_completed",
            extra={
                "query_hash": hashlib.sha256(query.encode("utf-8")).hexdigest(),
                "model": model,
                "corpus_size": len(corpus),
                "sources": len(sources),
                "answer_length": len(answer),
            },
        )
        return RAGResponse(answer=answer, model=model, sources=sources)
