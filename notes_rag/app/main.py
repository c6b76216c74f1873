from __future__ import annotations

"""FastAPI application entrypoint for asking questions about a note vault."""

import logging
import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from notes_rag.app.dependencies import get_pipeline, get_vault
from notes_rag.app.metrics import metrics_middleware, metrics_response, record_query_outcome
from notes_rag.app.schemas import ModelsResponse, QueryRequest, QueryResponse, SourceDocument
from notes_rag.app.settings import SUPPORTED_MODELS, settings
from notes_rag.loaders.vault import CorpusError, MarkdownVault
from notes_rag.rag.embeddings import EmbeddingConfigError
from notes_rag.rag.errors import InputError, ProviderError, QueryTimeoutError
from notes_rag.rag.llm import LLMConfigError
from notes_rag.rag.pipeline import QAPipeline

logger = logging.getLogger(__name__)

app = FastAPI(title="Notes RAG Agent", version="0.1.0")


def _configure_logging() -> None:
    """Configure root logging using environment settings."""
    level_name = settings.log_level.strip().upper()
    level = getattr(logging, level_name, logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    logger.setLevel(level)


_configure_logging()


def _safe_error_message(exc: Exception) -> str:
    """Return a safe error type name for logs and responses."""
    return type(exc).__name__


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Attach or create a request ID for traceability."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.middleware("http")
async def record_metrics(request: Request, call_next):
    """Capture request metrics before returning the response."""
    return await metrics_middleware(request, call_next)


@app.exception_handler(InputError)
async def input_error_handler(request: Request, exc: InputError) -> JSONResponse:
    record_query_outcome("input_error")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(QueryTimeoutError)
async def timeout_error_handler(request: Request, exc: QueryTimeoutError) -> JSONResponse:
    record_query_outcome("timeout")
    return JSONResponse(status_code=504, content={"detail": str(exc)})


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    logger.error(
        "provider_failed",
        extra={"request_id": _request_id(request), "detail": _safe_error_message(exc)},
    )
    record_query_outcome("provider_error")
    return JSONResponse(
        status_code=502,
        content={"detail": f"Provider request failed: {_safe_error_message(exc)}"},
    )


@app.exception_handler(EmbeddingConfigError)
@app.exception_handler(LLMConfigError)
async def config_error_handler(request: Request, exc: RuntimeError) -> JSONResponse:
    logger.error("configuration_invalid", extra={"detail": str(exc)})
    record_query_outcome("config_error")
    return JSONResponse(
        status_code=503,
        content={"detail": "Please set your OpenAI API key in the settings."},
    )


@app.exception_handler(CorpusError)
async def corpus_error_handler(request: Request, exc: CorpusError) -> JSONResponse:
    logger.error("corpus_unavailable", extra={"detail": str(exc)})
    record_query_outcome("corpus_error")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/metrics")
async def metrics():
    """Expose Prometheus-style metrics."""
    return metrics_response()


@app.get("/health")
async def health() -> dict[str, str]:
    """Simple health probe for uptime checks."""
    return {"status": "ok"}


@app.get("/models", response_model=ModelsResponse)
async def models() -> ModelsResponse:
    return ModelsResponse(models=list(SUPPORTED_MODELS), default=settings.selected_model)


@app.post("/query", response_model=QueryResponse)
async def query(
    request: QueryRequest,
    http_request: Request,
    pipeline: QAPipeline = Depends(get_pipeline),
    vault: MarkdownVault = Depends(get_vault),
) -> QueryResponse:
    """Answer a query from inline documents or from the note vault."""
    request_id = _request_id(http_request)
    model = request.model or settings.selected_model
    logger.info(
        "query_received",
        extra={
            "request_id": request_id,
            "model": model,
            "query_length": len(request.query),
            "inline_documents": request.documents is not None,
        },
    )
    if request.documents is not None:
        response = await pipeline.run(request.query, request.documents, model)
    else:
        response = await pipeline.answer_from_source(request.query, vault, model)
    record_query_outcome("answered")
    return QueryResponse(
        answer=response.answer,
        model=response.model,
        sources=[
            SourceDocument(content=match.document, score=match.score, position=match.position)
            for match in response.sources.matches
        ],
        request_id=request_id,
    )
