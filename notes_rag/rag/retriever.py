from __future__ import annotations

"""Query-time retrieval over a corpus that is embedded on every call."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from notes_rag.rag.embeddings import EmbeddingClient
from notes_rag.rag.similarity import cosine_similarity
from notes_rag.rag.types import Document, EmbeddingVector, RetrievalResult, ScoredDocument

TOP_K = 5

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Retriever:
    """Rank corpus documents by cosine similarity to the query."""
    embedder: EmbeddingClient
    top_k: int = TOP_K
    max_concurrency: int = 0

    async def retrieve(self, query: str, corpus: Sequence[Document]) -> RetrievalResult:
        """Embed query and corpus, score every document and keep the best ones.

        Any embedding failure aborts the whole retrieval; no partial ranking
        is ever returned.
        """
        documents = list(corpus)
        query_vector = await self.embedder.embed(query)
        vectors = await self._embed_corpus(documents)
        scored = self.score(query_vector, documents, vectors)
        # list.sort is stable with reverse=True, so ties keep corpus order.
        scored.sort(key=lambda item: item.score, reverse=True)
        matches = tuple(scored[: self.top_k])
        logger.info(
            "retrieval_complete",
            extra={
                "corpus_size": len(documents),
                "results": len(matches),
                "query_length": len(query),
                "top_score": matches[0].score if matches else None,
            },
        )
        return RetrievalResult(matches=matches)

    def score(
        self,
        query_vector: EmbeddingVector,
        documents: Sequence[Document],
        vectors: Sequence[EmbeddingVector],
    ) -> list[ScoredDocument]:
        """Pair each document with its similarity, by index."""
        scored: list[ScoredDocument] = []
        degenerate = 0
        for position, (document, vector) in enumerate(zip(documents, vectors)):
            if not any(vector) or not any(query_vector):
                degenerate += 1
            scored.append(
                ScoredDocument(
                    document=document,
                    score=cosine_similarity(query_vector, vector),
                    position=position,
                )
            )
        if degenerate:
            logger.warning("degenerate_similarity", extra={"documents": degenerate})
        return scored

    async def _embed_corpus(self, documents: list[Document]) -> list[EmbeddingVector]:
        """Embed all documents concurrently and wait for every result."""
        if not documents:
            return []
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None

        async def _embed(text: Document) -> EmbeddingVector:
            if semaphore is None:
                return await self.embedder.embed(text)
            async with semaphore:
                return await self.embedder.embed(text)

        tasks = [asyncio.ensure_future(_embed(document)) for document in documents]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
