from __future__ import annotations

"""Embedding-based reranking of fetched chunks."""

import asyncio
import logging
from typing import Sequence

from src.rag.embeddings import EmbeddingError, Embeddings
from src.rag.similarity import score
from src.rag.types import ChunkDocument, ScoredChunk, SearchConfig

logger = logging.getLogger(__name__)


async def rerank_documents(
    query: str,
    documents: Sequence[ChunkDocument],
    embeddings: Embeddings,
    config: SearchConfig,
) -> list[ChunkDocument]:
    """Keep the chunks most similar to ``query``.

    Chunks must score strictly above ``config.rerank_threshold``. Survivors
    are ordered by score descending, equal scores keep their input order, and
    at most ``config.max_results`` are returned. Empty input never reaches
    the embedding model.
    """
    if not documents:
        return []
    query_vector, document_vectors = await asyncio.gather(
        embeddings.embed_query(query),
        embeddings.embed_documents([document.content for document in documents]),
    )
    if len(document_vectors) != len(documents):
        raise EmbeddingError(
            f"Expected {len(documents)} document embeddings, got {len(document_vectors)}"
        )
    scored = [
        ScoredChunk(document=document, similarity=score(query_vector, vector, config.similarity_measure))
        for document, vector in zip(documents, document_vectors)
    ]
    kept = [item for item in scored if item.similarity > config.rerank_threshold]
    # sorted() is stable, so ties stay in input order.
    kept = sorted(kept, key=lambda item: item.similarity, reverse=True)
    selected = kept[: config.max_results]
    logger.info(
        "rerank_complete",
        extra={
            "candidates": len(documents),
            "above_threshold": len(kept),
            "returned": len(selected),
            "top_score": round(selected[0].similarity, 4) if selected else None,
        },
    )
    return [item.document for item in selected]
