from __future__ import annotations

"""Context assembly and citation helpers for synthesized answers."""

from dataclasses import dataclass
from typing import Sequence

from src.rag.types import ChunkDocument


@dataclass(frozen=True)
class Citation:
    """Citation metadata for a single context chunk."""
    label: str
    title: str
    url: str


def build_context_block(documents: Sequence[ChunkDocument]) -> str:
    """Number each document as ``[i] title`` followed by its content."""
    return "\n\n".join(
        f"[{idx}] {document.metadata.title}\n{document.content}"
        for idx, document in enumerate(documents, start=1)
    )


def build_citations(documents: Sequence[ChunkDocument]) -> list[Citation]:
    """Build citation labels matching the numbering of the context block."""
    return [
        Citation(
            label=f"[{idx}]",
            title=document.metadata.title,
            url=document.metadata.url,
        )
        for idx, document in enumerate(documents, start=1)
    ]
