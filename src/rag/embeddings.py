from __future__ import annotations

"""Embedding model adapters used for reranking."""

import asyncio
import hashlib
import math
import re
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

_TOKEN_RE = re.compile(r"[a-z0-9]+")


class EmbeddingError(RuntimeError):
    """Raised when embeddings fail or are invalid."""
    pass


class EmbeddingConfigError(RuntimeError):
    """Raised when embedding configuration is invalid."""
    pass


class Embeddings(Protocol):
    """Capability interface for embedding models."""

    async def embed_query(self, text: str) -> list[float]:
        """Return the embedding vector for a single query string."""
        raise NotImplementedError

    async def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        """Return one embedding vector per input text, in input order."""
        raise NotImplementedError


def validate_vector(vector: Sequence[float], dimension: int | None = None) -> list[float]:
    """Validate embedding vectors and coerce values to float."""
    if dimension is not None and len(vector) != dimension:
        raise EmbeddingError(
            f"Embedding dimension mismatch: expected {dimension}, got {len(vector)}"
        )
    cleaned: list[float] = []
    for value in vector:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EmbeddingError("Embedding contains a non-numeric value")
        if not math.isfinite(value):
            raise EmbeddingError("Embedding contains a non-finite value")
        cleaned.append(float(value))
    return cleaned


@dataclass
class HashEmbedder:
    """Deterministic hash-based embedder for testing or offline use."""
    dimension: int = 256

    async def embed_query(self, text: str) -> list[float]:
        return self.embed(text)

    async def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]

    def embed(self, text: str) -> list[float]:
        """Embed text using token hashing and L2 normalization."""
        tokens = _TOKEN_RE.findall(text.lower())
        if not tokens:
            return validate_vector([0.0] * self.dimension, self.dimension)
        vector = [0.0] * self.dimension
        for token in tokens:
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            idx = digest[0] % self.dimension
            vector[idx] += 1.0
        return validate_vector(self._l2_normalize(vector), self.dimension)

    def _l2_normalize(self, vector: list[float]) -> list[float]:
        """Normalize vector magnitude to 1.0."""
        norm = math.sqrt(sum(value * value for value in vector))
        if norm == 0.0:
            return vector
        return [value / norm for value in vector]


def resolve_openai_dimension(model: str) -> int | None:
    """Return expected dimension for OpenAI embedding model."""
    mapping = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }
    return mapping.get(model)


@dataclass
class OpenAIEmbedder:
    """Embedding provider using the OpenAI embeddings API."""
    api_key: str
    model: str
    dimension: int = 0
    base_url: str | None = None
    client: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate OpenAI configuration and create a client."""
        if not self.api_key:
            raise EmbeddingConfigError("OPENAI_API_KEY is required for OpenAIEmbedder")
        if not self.model:
            raise EmbeddingConfigError("OPENAI_EMBEDDING_MODEL is required for OpenAIEmbedder")
        resolved = resolve_openai_dimension(self.model)
        if self.dimension <= 0:
            self.dimension = resolved or 0
        elif resolved is not None and self.dimension != resolved:
            raise EmbeddingConfigError(
                f"EMBEDDING_DIMENSION should be {resolved} for model {self.model}"
            )
        try:
            from openai import AsyncOpenAI
        except ImportError as exc:
            raise EmbeddingError("openai package is required for OpenAIEmbedder") from exc
        self.client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)

    async def embed_query(self, text: str) -> list[float]:
        vectors = await self._embed([text])
        return vectors[0]

    async def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        return await self._embed(list(texts))

    async def _embed(self, texts: list[str]) -> list[list[float]]:
        try:
            response = await self.client.embeddings.create(model=self.model, input=texts)
        except Exception as exc:
            raise EmbeddingError(str(exc)) from exc
        items = sorted(response.data, key=lambda item: item.index)
        if len(items) != len(texts):
            raise EmbeddingError(
                f"OpenAI returned {len(items)} embeddings for {len(texts)} inputs"
            )
        dimension = self.dimension or None
        return [validate_vector(list(item.embedding), dimension) for item in items]


@dataclass
class GeminiEmbedder:
    """Embedding provider using the Gemini embeddings API."""
    api_key: str
    model: str
    dimension: int = 0
    timeout: float = 60.0
    client: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate Gemini configuration and create a client."""
        if not self.api_key:
            raise EmbeddingConfigError("GEMINI_API_KEY is required for GeminiEmbedder")
        if not self.model:
            raise EmbeddingConfigError("GEMINI_EMBEDDING_MODEL is required for GeminiEmbedder")
        try:
            import google.generativeai as genai
        except ImportError as exc:
            raise EmbeddingError("google-generativeai package is required for GeminiEmbedder") from exc
        genai.configure(api_key=self.api_key)
        self.client = genai

    async def embed_query(self, text: str) -> list[float]:
        vectors = await self._embed([text], task_type="retrieval_query")
        return vectors[0]

    async def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        return await self._embed(list(texts), task_type="retrieval_document")

    async def _embed(self, texts: list[str], task_type: str) -> list[list[float]]:
        def _run() -> Any:
            return self.client.embed_content(model=self.model, content=texts, task_type=task_type)

        try:
            result = await asyncio.wait_for(asyncio.to_thread(_run), timeout=self.timeout)
        except Exception as exc:
            raise EmbeddingError(str(exc)) from exc
        embeddings = None
        if isinstance(result, dict):
            embeddings = result.get("embedding")
        if embeddings is None:
            embeddings = getattr(result, "embedding", None)
        if not isinstance(embeddings, list) or len(embeddings) != len(texts):
            raise EmbeddingError("Gemini embedding response missing embedding vectors")
        dimension = self.dimension or None
        return [validate_vector(list(vector), dimension) for vector in embeddings]
