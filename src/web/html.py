from __future__ import annotations

"""HTML to plain text extraction for fetched pages."""

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]*>")
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_DROPPED_TAGS = ["script", "style", "noscript", "template"]


@dataclass(frozen=True)
class ExtractedPage:
    text: str
    title: str


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs, newlines included, into single spaces."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_html(html: str, url: str) -> ExtractedPage:
    """Convert markup into normalized text and a title.

    Anchor text is kept and link targets are discarded. The title falls back
    to ``url`` when the page has no usable ``<title>``.
    """
    try:
        text, title = _extract_with_soup(html)
    except Exception as exc:
        logger.warning(
            "html_parse_failed",
            extra={"url": url, "error": type(exc).__name__},
        )
        text, title = _extract_with_regex(html)
    return ExtractedPage(text=text, title=title or url)


def _extract_with_soup(html: str) -> tuple[str, str]:
    soup = BeautifulSoup(html, "html.parser")
    title_tag = soup.find("title")
    title = collapse_whitespace(title_tag.get_text()) if title_tag else ""
    for tag in soup(_DROPPED_TAGS):
        tag.decompose()
    root = soup.body or soup
    if root is soup and soup.head is not None:
        soup.head.decompose()
    return collapse_whitespace(root.get_text(" ")), title


def _extract_with_regex(html: str) -> tuple[str, str]:
    match = _TITLE_RE.search(html)
    title = collapse_whitespace(_TAG_RE.sub(" ", match.group(1))) if match else ""
    return collapse_whitespace(_TAG_RE.sub(" ", html)), title
