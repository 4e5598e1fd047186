from __future__ import annotations

from functools import lru_cache

from src.app.settings import settings
from src.loaders.chunking import RecursiveTextSplitter
from src.rag.embeddings import (
    EmbeddingConfigError,
    Embeddings,
    GeminiEmbedder,
    HashEmbedder,
    OpenAIEmbedder,
)
from src.rag.llm import ChatModel, build_chat_model
from src.rag.pipeline import SearchAgent
from src.web.fetcher import DocumentFetcher
from src.web.search import SearxngSearchClient


@lru_cache
def get_search_agent() -> SearchAgent:
    search_client = SearxngSearchClient(
        base_url=settings.searxng_url,
        language=settings.search_language,
        timeout=settings.search_timeout,
        user_agent=settings.user_agent,
    )
    fetcher = DocumentFetcher(
        splitter=RecursiveTextSplitter(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
        ),
        timeout=settings.fetch_timeout,
        max_bytes=settings.fetch_max_bytes,
        max_concurrency=settings.fetch_max_concurrency,
        user_agent=settings.user_agent,
    )
    return SearchAgent(
        search_client=search_client,
        fetcher=fetcher,
        config=settings.search_config(),
    )


@lru_cache
def get_chat_model() -> ChatModel:
    return build_chat_model(
        settings.llm_provider,
        api_key_openai=settings.openai_api_key,
        api_key_gemini=settings.gemini_api_key,
        openai_base_url=settings.openai_base_url,
        openai_model=settings.openai_chat_model,
        gemini_model=settings.gemini_chat_model,
        ollama_base_url=settings.ollama_base_url,
        ollama_model=settings.ollama_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
    )


@lru_cache
def get_embeddings() -> Embeddings:
    return build_embedder()


def reset_dependency_cache() -> None:
    get_search_agent.cache_clear()
    get_chat_model.cache_clear()
    get_embeddings.cache_clear()


def build_embedder() -> Embeddings:
    provider = settings.embedding_provider.lower().strip()
    if provider == "hash":
        return HashEmbedder(dimension=settings.embedding_dimension)
    if provider == "openai":
        return OpenAIEmbedder(
            api_key=settings.openai_api_key or "",
            model=settings.openai_embedding_model or "",
            dimension=settings.embedding_dimension,
            base_url=settings.openai_base_url,
        )
    if provider in {"gemini", "google"}:
        return GeminiEmbedder(
            api_key=settings.gemini_api_key or "",
            model=settings.gemini_embedding_model or "",
            dimension=settings.embedding_dimension,
        )
    raise EmbeddingConfigError(f"Unsupported embedding provider: {settings.embedding_provider}")
