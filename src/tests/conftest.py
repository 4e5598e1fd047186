from __future__ import annotations

"""Shared pytest fixtures and test environment defaults."""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["EMBEDDING_PROVIDER"] = "hash"
os.environ["RAG_LLM_PROVIDER"] = "ollama"
os.environ.pop("OPENAI_API_KEY", None)
os.environ.pop("GEMINI_API_KEY", None)
os.environ.setdefault("SEARXNG_URL", "http://searx.test")
os.environ.setdefault("RAG_METRICS_ENABLED", "true")


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
