from __future__ import annotations

"""Concurrent page fetching and chunking."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable

import httpx

from src.loaders.chunking import RecursiveTextSplitter
from src.rag.types import ChunkDocument, DocumentMetadata
from src.web.html import extract_html

logger = logging.getLogger(__name__)

_TEXT_CONTENT_TYPES = ("text/", "application/xhtml", "application/xml")


class FetchError(RuntimeError):
    """Raised when a page cannot be turned into text."""
    pass


@dataclass
class DocumentFetcher:
    """Fetch pages concurrently and turn each into chunk documents.

    Every URL is processed independently. A failing URL is logged and
    contributes no documents; it never aborts the other fetches.
    """
    splitter: RecursiveTextSplitter = field(default_factory=RecursiveTextSplitter)
    timeout: float = 15.0
    max_bytes: int = 5_242_880
    max_concurrency: int = 0
    user_agent: str | None = None
    transport: httpx.AsyncBaseTransport | None = None

    async def fetch(
        self, urls: Iterable[str], client: httpx.AsyncClient | None = None
    ) -> list[ChunkDocument]:
        """Fetch every URL and return the concatenation of their chunks."""
        targets = list(urls)
        if not targets:
            return []
        owns_client = client is None
        if owns_client:
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            )
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None
        try:
            results = await asyncio.gather(
                *(self._fetch_guarded(client, url, semaphore) for url in targets)
            )
        finally:
            if owns_client:
                await client.aclose()
        documents = [document for batch in results if batch for document in batch]
        logger.info(
            "documents_fetched",
            extra={
                "urls": len(targets),
                "failed_urls": sum(1 for batch in results if batch is None),
                "documents": len(documents),
            },
        )
        return documents

    async def _fetch_guarded(
        self,
        client: httpx.AsyncClient,
        url: str,
        semaphore: asyncio.Semaphore | None,
    ) -> list[ChunkDocument] | None:
        try:
            if semaphore is None:
                return await self.fetch_url(client, url)
            async with semaphore:
                return await self.fetch_url(client, url)
        except (httpx.HTTPError, httpx.InvalidURL, FetchError) as exc:
            logger.warning(
                "page_fetch_failed",
                extra={"url": url, "error": type(exc).__name__, "detail": str(exc)},
            )
            return None

    async def fetch_url(self, client: httpx.AsyncClient, url: str) -> list[ChunkDocument]:
        """Fetch one page and chunk its extracted text."""
        response = await client.get(url)
        response.raise_for_status()
        content_type = response.headers.get("content-type", "").lower()
        if content_type and not content_type.startswith(_TEXT_CONTENT_TYPES):
            raise FetchError(f"Unsupported content type: {content_type}")
        if self.max_bytes and len(response.content) > self.max_bytes:
            raise FetchError("Page exceeds maximum size limit")
        page = extract_html(response.text, url)
        metadata = DocumentMetadata(title=page.title, url=url)
        return [
            ChunkDocument(content=chunk, metadata=metadata)
            for chunk in self.splitter.split_text(page.text)
        ]
