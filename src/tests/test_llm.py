from __future__ import annotations

import json

import httpx
import pytest

from src.rag.llm import LLMError, OllamaChatModel, OpenAIChatModel, build_chat_model
from src.rag.rewriter import LLMQueryRewriter
from src.rag.types import ChatMessage
from src.tests.stubs import EchoChatModel

pytestmark = pytest.mark.anyio

MESSAGES = [
    ChatMessage(role="system", content="Be brief."),
    ChatMessage(role="user", content="What is a qubit?"),
]


async def test_ollama_chat_model_posts_messages() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"message": {"role": "assistant", "content": "A unit."}})

    model = OllamaChatModel(
        base_url="http://ollama.test",
        model="llama3.1",
        temperature=0.1,
        max_tokens=64,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )

    assert await model.invoke(MESSAGES) == "A unit."
    assert seen[0]["messages"] == [
        {"role": "system", "content": "Be brief."},
        {"role": "user", "content": "What is a qubit?"},
    ]
    assert seen[0]["stream"] is False


async def test_openai_chat_model_reads_first_choice() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.url.path == "/v1/chat/completions"
        return httpx.Response(200, json={"choices": [{"message": {"content": "Quantum bit."}}]})

    model = OpenAIChatModel(
        api_key="sk-test",
        base_url="http://openai.test/v1",
        model="gpt-4o-mini",
        temperature=0.2,
        max_tokens=64,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )

    assert await model.invoke(MESSAGES) == "Quantum bit."


async def test_chat_model_errors_are_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "overloaded"})

    model = OllamaChatModel(
        base_url="http://ollama.test",
        model="llama3.1",
        temperature=0.1,
        max_tokens=64,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(LLMError):
        await model.invoke(MESSAGES)


async def test_build_chat_model_requires_openai_credentials() -> None:
    with pytest.raises(LLMError):
        build_chat_model(
            "openai",
            api_key_openai=None,
            api_key_gemini=None,
            openai_base_url="https://api.openai.com/v1",
            openai_model="gpt-4o-mini",
            gemini_model=None,
            ollama_base_url="http://localhost:11434",
            ollama_model="llama3.1",
            temperature=0.1,
            max_tokens=64,
            timeout=5,
        )


async def test_rewriter_uses_model_reply() -> None:
    model = EchoChatModel(rephrased=" qubit basics \n")

    assert await LLMQueryRewriter(model).rewrite("what r qubits") == "qubit basics"
    assert "Query: what r qubits" in model.calls[0][0].content


async def test_rewriter_falls_back_on_blank_reply() -> None:
    model = EchoChatModel(rephrased="   ")

    assert await LLMQueryRewriter(model).rewrite("what r qubits") == "what r qubits"
