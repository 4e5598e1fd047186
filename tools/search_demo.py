from __future__ import annotations

"""CLI utility to run one web search query through the agent."""

import argparse
import asyncio

from src.app.dependencies import get_chat_model, get_embeddings, get_search_agent
from src.app.settings import settings


async def _run(query: str, measure: str, threshold: float, max_results: int) -> str:
    agent = get_search_agent()
    agent.config = agent.config.with_overrides(
        similarity_measure=measure,
        rerank_threshold=threshold,
        max_results=max_results,
    )
    return await agent.search(query, get_chat_model(), get_embeddings())


def main() -> None:
    """Answer a query using the configured search endpoint and models."""
    parser = argparse.ArgumentParser(description="Answer a question from live web results.")
    parser.add_argument("query", help="Question to answer.")
    parser.add_argument(
        "--measure",
        choices=["cosine", "dot"],
        default=settings.similarity_measure,
        help="Similarity measure used for reranking.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=settings.rerank_threshold,
        help="Minimum similarity a chunk must exceed.",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        default=settings.max_results,
        help="Maximum number of chunks passed to the model.",
    )
    args = parser.parse_args()

    answer = asyncio.run(_run(args.query, args.measure, args.threshold, args.max_results))
    print(f"Answer: {answer}")


if __name__ == "__main__":
    main()
