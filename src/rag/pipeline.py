from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from src.rag.citations import build_context_block
from src.rag.embeddings import Embeddings
from src.rag.llm import ChatModel
from src.rag.reranker import rerank_documents
from src.rag.rewriter import LLMQueryRewriter
from src.rag.types import ChatMessage, ChunkDocument, SearchConfig, SearchOutcome
from src.web.fetcher import DocumentFetcher
from src.web.search import SearxngSearchClient

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are an AI assistant that helps users by providing detailed, accurate answers "
    "based on the given context. Always cite your sources using [number] notation."
)


def build_answer_messages(
    query: str,
    documents: Sequence[ChunkDocument],
    history: Sequence[ChatMessage] = (),
) -> list[ChatMessage]:
    """Assemble the synthesis prompt around the numbered context block."""
    context = build_context_block(documents)
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        *history,
        ChatMessage(role="user", content=query),
        ChatMessage(role="system", content=f"Context:\n{context}"),
    ]


@dataclass
class SearchAgent:
    search_client: SearxngSearchClient
    fetcher: DocumentFetcher = field(default_factory=DocumentFetcher)
    config: SearchConfig = field(default_factory=SearchConfig)

    async def retrieve(
        self,
        query: str,
        chat_model: ChatModel,
        embeddings: Embeddings,
    ) -> tuple[str, list[ChunkDocument]]:
        """Rephrase, search, fetch and rerank; return the rephrased query and kept chunks."""
        rephrased = await LLMQueryRewriter(chat_model).rewrite(query)
        results = await self.search_client.search(rephrased)
        documents = await self.fetcher.fetch([result.url for result in results])
        ranked = await rerank_documents(rephrased, documents, embeddings, self.config)
        logger.info(
            "retrieval_complete",
            extra={
                "search_results": len(results),
                "documents": len(documents),
                "ranked": len(ranked),
            },
        )
        return rephrased, ranked

    async def synthesize(
        self,
        query: str,
        documents: Sequence[ChunkDocument],
        chat_model: ChatModel,
        history: Sequence[ChatMessage] = (),
    ) -> str:
        """Answer the original query from the ranked chunks, even when there are none."""
        messages = build_answer_messages(query, documents, history)
        return await chat_model.invoke(messages)

    async def run(
        self,
        query: str,
        chat_model: ChatModel,
        embeddings: Embeddings,
        history: Sequence[ChatMessage] = (),
    ) -> SearchOutcome:
        rephrased, documents = await self.retrieve(query, chat_model, embeddings)
        answer = await self.synthesize(query, documents, chat_model, history)
        logger.info(
            "search_complete",
            extra={
                "query_length": len(query),
                "sources": len(documents),
                "answer_length": len(answer),
            },
        )
        return SearchOutcome(answer=answer, rephrased_query=rephrased, documents=documents)

    async def search(
        self,
        query: str,
        chat_model: ChatModel,
        embeddings: Embeddings,
        history: Sequence[ChatMessage] = (),
    ) -> str:
        outcome = await self.run(query, chat_model, embeddings, history)
        return outcome.answer
