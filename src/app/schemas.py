from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class SearchRequest(BaseModel):
    query: str = Field(min_length=1)
    history: list[ChatMessage] = Field(default_factory=list)
    similarity_measure: Literal["cosine", "dot"] | None = None
    rerank_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    max_results: int | None = Field(default=None, ge=1, le=100)
    trace_id: str | None = None


class SourceCitation(BaseModel):
    label: str
    title: str
    url: str


class SearchResponse(BaseModel):
    answer: str
    rephrased_query: str
    sources: list[SourceCitation]
    request_id: str
