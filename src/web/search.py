from __future__ import annotations

"""SearxNG web search client."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.rag.types import RawSearchResult

logger = logging.getLogger(__name__)


class SearchError(RuntimeError):
    """Raised when the search endpoint fails or returns an invalid payload."""
    pass


@dataclass(frozen=True)
class SearxngSearchClient:
    """Query a SearxNG instance through its JSON API.

    Failures never reach the caller: they are logged and the search yields no
    results, so a provider outage starves the pipeline instead of aborting it.
    """
    base_url: str | None
    language: str = "en"
    timeout: float = 15.0
    user_agent: str | None = None
    transport: httpx.AsyncBaseTransport | None = None

    async def search(self, query: str) -> list[RawSearchResult]:
        """Return search hits for ``query`` in provider order."""
        try:
            data = await self._request(query)
            results = _parse_results(data)
        except (httpx.HTTPError, httpx.InvalidURL, SearchError) as exc:
            logger.warning(
                "web_search_failed",
                extra={"error": type(exc).__name__, "detail": str(exc)},
            )
            return []
        logger.info(
            "web_search_complete",
            extra={"results": len(results), "query_length": len(query)},
        )
        return results

    async def _request(self, query: str) -> Any:
        if not self.base_url:
            raise SearchError("SEARXNG_URL is not configured")
        params = {"q": query, "format": "json", "language": self.language}
        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(
                f"{self.base_url.rstrip('/')}/search",
                params=params,
                headers=headers,
            )
            response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            raise SearchError("Search response is not valid JSON") from exc


def _parse_results(data: Any) -> list[RawSearchResult]:
    if not isinstance(data, dict):
        raise SearchError("Search response must be a JSON object")
    items = data.get("results") or []
    if not isinstance(items, list):
        raise SearchError("Search response results must be a list")
    results: list[RawSearchResult] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        url = item.get("url")
        if not isinstance(url, str) or not url.strip():
            continue
        results.append(
            RawSearchResult(
                url=url.strip(),
                title=str(item.get("title") or ""),
                snippet=str(item.get("content") or ""),
                engine=item.get("engine"),
            )
        )
    return results
