from __future__ import annotations

"""Language model adapters for query rephrasing and answer synthesis."""

from dataclasses import dataclass
import asyncio
import logging
from typing import Protocol, Sequence

import httpx

from src.rag.types import ChatMessage


class LLMError(RuntimeError):
    """Raised when LLM requests fail or responses are invalid."""
    pass


logger = logging.getLogger(__name__)


class ChatModel(Protocol):
    """Capability interface for chat language models."""

    async def invoke(self, messages: Sequence[ChatMessage]) -> str:
        """Return the model's text reply to the given messages."""
        raise NotImplementedError


def _as_payload(messages: Sequence[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": message.role, "content": message.content} for message in messages]


@dataclass(frozen=True)
class OllamaChatModel:
    """Chat model backed by the Ollama chat API."""
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout: float
    transport: httpx.AsyncBaseTransport | None = None

    async def invoke(self, messages: Sequence[ChatMessage]) -> str:
        payload = {
            "model": self.model,
            "messages": _as_payload(messages),
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/api/chat", json=payload)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LLMError(str(exc)) from exc
        if not isinstance(data, dict):
            raise LLMError("Invalid LLM response")
        message = data.get("message") or {}
        content = message.get("content")
        if not isinstance(content, str):
            raise LLMError("Invalid LLM response")
        return content


@dataclass(frozen=True)
class OpenAIChatModel:
    """Chat model backed by OpenAI chat completions."""
    api_key: str
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout: float
    transport: httpx.AsyncBaseTransport | None = None

    async def invoke(self, messages: Sequence[ChatMessage]) -> str:
        payload = {
            "model": self.model,
            "messages": _as_payload(messages),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LLMError(str(exc)) from exc

        if not isinstance(data, dict):
            raise LLMError("Invalid OpenAI response")
        choices = data.get("choices") or []
        if not choices:
            raise LLMError("Invalid OpenAI response")
        message = choices[0].get("message") or {}
        content = message.get("content")
        if not isinstance(content, str):
            raise LLMError("Invalid OpenAI response content")
        return content


@dataclass(frozen=True)
class GeminiChatModel:
    """Chat model backed by Gemini generative models."""
    api_key: str
    model: str
    temperature: float
    max_tokens: int
    timeout: float

    async def invoke(self, messages: Sequence[ChatMessage]) -> str:
        try:
            import google.generativeai as genai
        except ImportError as exc:
            raise LLMError("google-generativeai is required for GeminiChatModel") from exc

        prompt = _flatten_messages(messages)

        def _run() -> str:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(self.model)
            response = model.generate_content(
                prompt,
                generation_config={
                    "temperature": self.temperature,
                    "max_output_tokens": self.max_tokens,
                },
            )
            return getattr(response, "text", "") or ""

        try:
            return await asyncio.wait_for(asyncio.to_thread(_run), timeout=self.timeout)
        except Exception as exc:
            raise LLMError(str(exc)) from exc


def _flatten_messages(messages: Sequence[ChatMessage]) -> str:
    """Render chat messages as a single labelled prompt."""
    lines: list[str] = []
    for message in messages:
        content = message.content.strip()
        if content:
            lines.append(f"{message.role.capitalize()}: {content}")
    return "\n\n".join(lines)


def build_chat_model(
    provider: str,
    *,
    api_key_openai: str | None,
    api_key_gemini: str | None,
    openai_base_url: str,
    openai_model: str | None,
    gemini_model: str | None,
    ollama_base_url: str,
    ollama_model: str,
    temperature: float,
    max_tokens: int,
    timeout: float,
) -> OllamaChatModel | OpenAIChatModel | GeminiChatModel:
    """Factory for chat models based on provider."""
    normalized = provider.strip().lower()
    if normalized in {"openai"}:
        if not api_key_openai:
            raise LLMError("OPENAI_API_KEY is required for OpenAI provider")
        if not openai_model:
            raise LLMError("OPENAI_CHAT_MODEL is required for OpenAI provider")
        return OpenAIChatModel(
            api_key=api_key_openai,
            base_url=openai_base_url.rstrip("/"),
            model=openai_model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
    if normalized in {"gemini", "google"}:
        if not api_key_gemini:
            raise LLMError("GEMINI_API_KEY is required for Gemini provider")
        if not gemini_model:
            raise LLMError("GEMINI_CHAT_MODEL is required for Gemini provider")
        return GeminiChatModel(
            api_key=api_key_gemini,
            model=gemini_model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
    if normalized not in {"", "ollama"}:
        logger.warning("unknown_llm_provider", extra={"provider": normalized})
    return OllamaChatModel(
        base_url=ollama_base_url.rstrip("/"),
        model=ollama_model,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=timeout,
    )

