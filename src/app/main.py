from __future__ import annotations

"""FastAPI application entrypoint for the web search RAG agent."""

import logging
import uuid

from fastapi import Depends, FastAPI, HTTPException, Request

from src.app.dependencies import get_chat_model, get_embeddings, get_search_agent
from src.app.metrics import metrics_middleware, metrics_response, record_search
from src.app.schemas import SearchRequest, SearchResponse, SourceCitation
from src.app.settings import settings
from src.rag.citations import build_citations
from src.rag.embeddings import Embeddings, EmbeddingError
from src.rag.llm import ChatModel, LLMError
from src.rag.pipeline import SearchAgent
from src.rag.similarity import InvalidInputError
from src.rag.types import ChatMessage, SearchConfig

logger = logging.getLogger(__name__)

app = FastAPI(title="Web Search RAG Agent", version="0.1.0")


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


def _resolve_config(request: SearchRequest, base: SearchConfig) -> SearchConfig:
    """Apply per-request reranking overrides on top of the configured policy."""
    return base.with_overrides(
        similarity_measure=request.similarity_measure,
        rerank_threshold=request.rerank_threshold,
        max_results=request.max_results,
    )


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


@app.get("/metrics")
async def metrics():
    """Expose Prometheus-style metrics."""
    return metrics_response()


@app.get("/health")
async def health() -> dict[str, str]:
    """Simple health probe for uptime checks."""
    return {"status": "ok"}


@app.post("/search", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    http_request: Request,
    agent: SearchAgent = Depends(get_search_agent),
    chat_model: ChatModel = Depends(get_chat_model),
    embeddings: Embeddings = Depends(get_embeddings),
) -> SearchResponse:
    """Answer a query from freshly searched and reranked web pages."""
    request_id = request.trace_id or getattr(http_request.state, "request_id", str(uuid.uuid4()))
    config = _resolve_config(request, agent.config)
    if config != agent.config:
        agent = SearchAgent(search_client=agent.search_client, fetcher=agent.fetcher, config=config)
    history = [ChatMessage(role=item.role, content=item.content) for item in request.history]
    try:
        outcome = await agent.run(request.query, chat_model, embeddings, history)
    except (LLMError, EmbeddingError, InvalidInputError) as exc:
        record_search("error")
        logger.warning(
            "search_failed",
            extra={"request_id": request_id, "error": type(exc).__name__},
        )
        raise HTTPException(status_code=502, detail=type(exc).__name__) from exc
    record_search("ok", len(outcome.documents))
    sources = [
        SourceCitation(label=citation.label, title=citation.title, url=citation.url)
        for citation in build_citations(outcome.documents)
    ]
    return SearchResponse(
        answer=outcome.answer,
        rephrased_query=outcome.rephrased_query,
        sources=sources,
        request_id=request_id,
    )
