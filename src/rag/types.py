from __future__ import annotations

"""Core data types for web search retrieval."""

from dataclasses import dataclass, field, replace
from typing import Any, Literal

SimilarityMeasure = Literal["cosine", "dot"]

DEFAULT_SIMILARITY_MEASURE: SimilarityMeasure = "cosine"
DEFAULT_RERANK_THRESHOLD = 0.3
DEFAULT_MAX_RESULTS = 15


@dataclass(frozen=True)
class SearchConfig:
    """Reranking policy applied to fetched chunks."""
    similarity_measure: SimilarityMeasure = DEFAULT_SIMILARITY_MEASURE
    rerank_threshold: float = DEFAULT_RERANK_THRESHOLD
    max_results: int = DEFAULT_MAX_RESULTS

    def __post_init__(self) -> None:
        if self.similarity_measure not in {"cosine", "dot"}:
            raise ValueError(f"Unsupported similarity measure: {self.similarity_measure}")
        if not 0.0 <= self.rerank_threshold <= 1.0:
            raise ValueError("rerank_threshold must be within [0, 1]")
        if self.max_results <= 0:
            raise ValueError("max_results must be a positive integer")

    @classmethod
    def from_overrides(cls, **overrides: Any) -> SearchConfig:
        """Merge non-empty overrides over the defaults."""
        return cls().with_overrides(**overrides)

    def with_overrides(self, **overrides: Any) -> SearchConfig:
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


@dataclass(frozen=True)
class RawSearchResult:
    """Single hit returned by the web search endpoint."""
    url: str
    title: str = ""
    snippet: str = ""
    engine: str | None = None


@dataclass(frozen=True)
class DocumentMetadata:
    title: str
    url: str


@dataclass(frozen=True)
class ChunkDocument:
    """Chunk of a fetched page with its source metadata."""
    content: str
    metadata: DocumentMetadata


@dataclass(frozen=True)
class ScoredChunk:
    document: ChunkDocument
    similarity: float


@dataclass(frozen=True)
class ChatMessage:
    """Single prompt or conversation turn."""
    role: Literal["system", "user", "assistant"]
    content: str


@dataclass(frozen=True)
class SearchOutcome:
    """Answer plus the retrieval state that produced it."""
    answer: str
    rephrased_query: str
    documents: list[ChunkDocument] = field(default_factory=list)
