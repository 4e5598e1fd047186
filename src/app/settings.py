from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from src.rag.types import SearchConfig

load_dotenv()


@dataclass(frozen=True)
class Settings:
    searxng_url: str | None = os.getenv("SEARXNG_URL")
    search_language: str = os.getenv("RAG_SEARCH_LANGUAGE", "en")
    search_timeout: float = float(os.getenv("RAG_SEARCH_TIMEOUT", "15"))
    fetch_timeout: float = float(os.getenv("RAG_FETCH_TIMEOUT", "15"))
    fetch_max_bytes: int = int(os.getenv("RAG_FETCH_MAX_BYTES", "5242880"))
    fetch_max_concurrency: int = int(os.getenv("RAG_FETCH_MAX_CONCURRENCY", "0"))
    user_agent: str = os.getenv("RAG_USER_AGENT", "web-search-rag/0.1")
    chunk_size: int = int(os.getenv("RAG_CHUNK_SIZE", "1000"))
    chunk_overlap: int = int(os.getenv("RAG_CHUNK_OVERLAP", "200"))
    similarity_measure: str = os.getenv("RAG_SIMILARITY_MEASURE", "cosine")
    rerank_threshold: float = float(os.getenv("RAG_RERANK_THRESHOLD", "0.3"))
    max_results: int = int(os.getenv("RAG_MAX_RESULTS", "15"))
    embedding_provider: str = os.getenv("EMBEDDING_PROVIDER", "hash")
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "256"))
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_chat_model: str | None = os.getenv("OPENAI_CHAT_MODEL")
    openai_embedding_model: str | None = os.getenv("OPENAI_EMBEDDING_MODEL")
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_chat_model: str | None = os.getenv("GEMINI_CHAT_MODEL")
    gemini_embedding_model: str | None = os.getenv("GEMINI_EMBEDDING_MODEL")
    llm_provider: str = os.getenv("RAG_LLM_PROVIDER", "ollama")
    llm_temperature: float = float(os.getenv("RAG_LLM_TEMPERATURE", "0.7"))
    llm_max_tokens: int = int(os.getenv("RAG_LLM_MAX_TOKENS", "1024"))
    llm_timeout: float = float(os.getenv("RAG_LLM_TIMEOUT", "60"))
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3.1")
    log_level: str = os.getenv("RAG_LOG_LEVEL", "INFO")
    metrics_enabled: bool = os.getenv("RAG_METRICS_ENABLED", "true").lower() in {"1", "true", "yes"}

    def search_config(self) -> SearchConfig:
        """Build the immutable reranking policy from environment values."""
        return SearchConfig(
            similarity_measure=self.similarity_measure.strip().lower(),
            rerank_threshold=self.rerank_threshold,
            max_results=self.max_results,
        )


settings = Settings()
