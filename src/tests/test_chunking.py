from __future__ import annotations

"""Chunking behavior tests."""

from src.loaders.chunking import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    RecursiveTextSplitter,
    split_text,
)


def test_empty_input_yields_no_chunks() -> None:
    assert split_text("") == []
    assert split_text("   \n ") == []


def test_short_text_is_single_chunk() -> None:
    assert split_text("Quantum computing uses qubits.") == ["Quantum computing uses qubits."]


def test_defaults_are_documented_constants() -> None:
    splitter = RecursiveTextSplitter()

    assert splitter.chunk_size == DEFAULT_CHUNK_SIZE == 1000
    assert splitter.chunk_overlap == DEFAULT_CHUNK_OVERLAP == 200


def test_chunks_respect_size_and_overlap() -> None:
    text = " ".join(f"word{idx}" for idx in range(400))
    splitter = RecursiveTextSplitter(chunk_size=200, chunk_overlap=40)

    chunks = splitter.split_text(text)

    assert len(chunks) > 1
    assert all(0 < len(chunk) <= 200 for chunk in chunks)
    for previous, current in zip(chunks, chunks[1:]):
        assert previous.split()[-1] in current.split()


def test_prefers_paragraph_boundaries() -> None:
    first = "Alpha sentence one. Alpha sentence two."
    second = "Beta sentence one. Beta sentence two."
    splitter = RecursiveTextSplitter(chunk_size=50, chunk_overlap=0)

    chunks = splitter.split_text(f"{first}\n\n{second}")

    assert chunks == [first, second]


def test_falls_back_to_sentence_boundaries() -> None:
    text = "One two three. Four five six. Seven eight nine."
    splitter = RecursiveTextSplitter(chunk_size=20, chunk_overlap=0)

    chunks = splitter.split_text(text)

    assert chunks == ["One two three.", "Four five six.", "Seven eight nine."]


def test_hard_cut_for_unbroken_text() -> None:
    splitter = RecursiveTextSplitter(chunk_size=10, chunk_overlap=0)

    chunks = splitter.split_text("x" * 25)

    assert chunks == ["x" * 10, "x" * 10, "x" * 5]


def test_overlap_not_smaller_than_size_is_clamped() -> None:
    splitter = RecursiveTextSplitter(chunk_size=100, chunk_overlap=150)

    assert splitter.chunk_overlap == 25
