from __future__ import annotations

"""Recursive character chunking for extracted page text."""

from collections import deque
from dataclasses import dataclass, field

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200

# Paragraph, line, sentence and word boundaries, then a hard cut.
DEFAULT_SEPARATORS = ("\n\n", "\n", ". ", " ", "")


@dataclass
class RecursiveTextSplitter:
    """Split text into bounded, overlapping chunks.

    Boundaries are tried in the order of ``separators``. Pieces that still
    exceed ``chunk_size`` are split again with the next separator, and short
    pieces are merged back together until the size budget is reached.
    Every returned chunk is stripped and at most ``chunk_size`` characters.
    """
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP
    separators: tuple[str, ...] = field(default=DEFAULT_SEPARATORS)

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.chunk_overlap < 0:
            self.chunk_overlap = 0
        if self.chunk_overlap >= self.chunk_size:
            self.chunk_overlap = max(0, self.chunk_size // 4)

    def split_text(self, text: str) -> list[str]:
        """Split text into ordered chunks; blank input yields no chunks."""
        if not text or not text.strip():
            return []
        return self._split(text, list(self.separators))

    def _split(self, text: str, separators: list[str]) -> list[str]:
        separator = ""
        remaining: list[str] = []
        for idx, candidate in enumerate(separators):
            if candidate == "" or candidate in text:
                separator = candidate
                remaining = separators[idx + 1 :]
                break

        chunks: list[str] = []
        pending: list[str] = []
        for piece in _split_keeping_separator(text, separator):
            if len(piece) <= self.chunk_size:
                pending.append(piece)
                continue
            if pending:
                chunks.extend(self._merge(pending))
                pending = []
            if remaining:
                chunks.extend(self._split(piece, remaining))
            else:
                chunks.extend(self._merge(list(piece)))
        if pending:
            chunks.extend(self._merge(pending))
        return chunks

    def _merge(self, pieces: list[str]) -> list[str]:
        """Greedily join pieces up to chunk_size, carrying overlap forward."""
        chunks: list[str] = []
        window: deque[str] = deque()
        total = 0
        for piece in pieces:
            length = len(piece)
            if window and total + length > self.chunk_size:
                chunk = "".join(window).strip()
                if chunk:
                    chunks.append(chunk)
                while window and (
                    total > self.chunk_overlap or total + length > self.chunk_size
                ):
                    total -= len(window.popleft())
            window.append(piece)
            total += length
        chunk = "".join(window).strip()
        if chunk:
            chunks.append(chunk)
        return chunks


def _split_keeping_separator(text: str, separator: str) -> list[str]:
    """Split text, leaving each separator attached to the piece before it."""
    if separator == "":
        return list(text)
    parts = text.split(separator)
    pieces = [part + separator for part in parts[:-1]]
    pieces.append(parts[-1])
    return [piece for piece in pieces if piece]


def split_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Split text with a default-configured recursive splitter."""
    return RecursiveTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap).split_text(text)
