from __future__ import annotations

"""Query rephrasing ahead of web search."""

from dataclasses import dataclass

from src.rag.llm import ChatModel
from src.rag.types import ChatMessage

REPHRASE_TEMPLATE = (
    "Rephrase the following query for web search, making it more focused and specific:\n"
    "Query: {query}\n"
    "Rephrased query:"
)


class QueryRewriter:
    """Base class for query rewriters."""
    async def rewrite(self, query: str) -> str:
        """Return a rewritten query or the original if unchanged."""
        raise NotImplementedError


@dataclass(frozen=True)
class LLMQueryRewriter(QueryRewriter):
    """Rewriter that asks a chat model for a search-focused query.

    Model failures propagate; a blank reply falls back to the original query.
    """
    chat_model: ChatModel
    template: str = REPHRASE_TEMPLATE

    async def rewrite(self, query: str) -> str:
        if not query.strip():
            return query
        prompt = self.template.format(query=query)
        content = await self.chat_model.invoke([ChatMessage(role="user", content=prompt)])
        rewritten = content.strip()
        return rewritten or query
