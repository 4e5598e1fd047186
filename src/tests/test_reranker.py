from __future__ import annotations

import math

import pytest

from src.rag.embeddings import EmbeddingError, HashEmbedder
from src.rag.reranker import rerank_documents
from src.rag.similarity import InvalidInputError, score
from src.rag.types import ChunkDocument, DocumentMetadata, SearchConfig
from src.tests.stubs import ConstantEmbeddings, MappedEmbeddings

pytestmark = pytest.mark.anyio


def make_doc(content: str, url: str = "https://x.test/page") -> ChunkDocument:
    return ChunkDocument(content=content, metadata=DocumentMetadata(title="Page", url=url))


def unit_vector_at(similarity: float) -> list[float]:
    """Return a unit vector whose cosine with [1, 0] equals ``similarity``."""
    return [similarity, math.sqrt(1.0 - similarity * similarity)]


async def test_empty_documents_skip_embedding_model() -> None:
    embeddings = ConstantEmbeddings()

    result = await rerank_documents("query", [], embeddings, SearchConfig())

    assert result == []
    assert embeddings.query_calls == 0
    assert embeddings.document_calls == 0


async def test_threshold_sort_and_truncate() -> None:
    docs = [make_doc("low"), make_doc("mid"), make_doc("high")]
    embeddings = MappedEmbeddings(
        query_vector=[1.0, 0.0],
        vectors={
            "low": unit_vector_at(0.1),
            "mid": unit_vector_at(0.5),
            "high": unit_vector_at(0.9),
        },
    )
    config = SearchConfig(similarity_measure="cosine", rerank_threshold=0.3, max_results=2)

    result = await rerank_documents("query", docs, embeddings, config)

    assert [doc.content for doc in result] == ["high", "mid"]
    assert result[0] is docs[2]
    assert embeddings.query_calls == 1
    assert embeddings.document_calls == 1


async def test_threshold_is_strict() -> None:
    docs = [make_doc("exact"), make_doc("above")]
    embeddings = MappedEmbeddings(
        query_vector=[1.0, 0.0],
        vectors={"exact": [0.5, 0.0], "above": [0.6, 0.0]},
    )
    config = SearchConfig(similarity_measure="dot", rerank_threshold=0.5, max_results=5)

    result = await rerank_documents("query", docs, embeddings, config)

    assert [doc.content for doc in result] == ["above"]


async def test_equal_scores_keep_input_order() -> None:
    docs = [make_doc(f"doc-{idx}", url=f"https://x.test/{idx}") for idx in range(5)]
    embeddings = ConstantEmbeddings(vector=[0.2, 0.4, 0.4])

    result = await rerank_documents("query", docs, embeddings, SearchConfig(max_results=10))

    assert result == docs


async def test_properties_hold_for_hash_embeddings() -> None:
    texts = [
        "quantum computers use qubits",
        "qubits can be entangled",
        "bread recipes need flour",
        "quantum error correction protects qubits",
        "football season starts soon",
        "superposition lets qubits hold many states",
    ]
    docs = [make_doc(text) for text in texts]
    embedder = HashEmbedder(dimension=64)
    config = SearchConfig(similarity_measure="cosine", rerank_threshold=0.1, max_results=3)
    query = "how do quantum qubits work"

    result = await rerank_documents(query, docs, embedder, config)

    query_vector = embedder.embed(query)
    scores = [score(query_vector, embedder.embed(doc.content), "cosine") for doc in result]
    assert len(result) <= config.max_results
    assert all(value > config.rerank_threshold for value in scores)
    assert scores == sorted(scores, reverse=True)


async def test_dimension_mismatch_propagates() -> None:
    docs = [make_doc("a")]
    embeddings = MappedEmbeddings(query_vector=[1.0, 0.0], vectors={"a": [1.0, 0.0, 0.0]})

    with pytest.raises(InvalidInputError):
        await rerank_documents("query", docs, embeddings, SearchConfig())


async def test_missing_document_vectors_raise() -> None:
    class ShortEmbeddings(ConstantEmbeddings):
        async def embed_documents(self, texts):
            return []

    with pytest.raises(EmbeddingError):
        await rerank_documents("query", [make_doc("a")], ShortEmbeddings(), SearchConfig())
