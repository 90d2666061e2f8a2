# src/llm/adapters/ollama_adapter.py — v1
"""Ollama local LLM adapter implementing BaseLLMClient."""

from __future__ import annotations

import time
from typing import Any

from contentflow.core.errors import CompletionError
from contentflow.llm.base_client import BaseLLMClient
from contentflow.llm.models import LLMResponse, Message


class OllamaAdapter(BaseLLMClient):
    """Ollama local inference adapter."""

    def __init__(
        self, model: str = "llama3", host: str = "http://localhost:11434", **kwargs: Any,
    ):
        self._model = model
        self._host = host

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 8192,
        temperature: float = 0.7,
    ) -> LLMResponse:
        import ollama

        client = ollama.AsyncClient(host=self._host)
        msgs: list[dict[str, str]] = []
        if system:
            msgs.append({"role": "system", "content": system})
        for m in messages:
            msgs.append({"role": m.role, "content": m.content})

        options: dict[str, Any] = {
            "num_predict": max_tokens,
            "temperature": temperature,
        }

        t0 = time.monotonic()
        try:
            resp = await client.chat(model=self._model, messages=msgs, options=options)
        except Exception as e:
            raise CompletionError(f"Ollama request failed: {e}", provider="ollama") from e
        latency = int((time.monotonic() - t0) * 1000)

        try:
            content = resp["message"]["content"]
        except (KeyError, TypeError) as e:
            raise CompletionError("Ollama response missing message content", provider="ollama") from e
        if not content:
            raise CompletionError("Ollama response contained empty content", provider="ollama")

        return LLMResponse(
            content=content,
            input_tokens=resp.get("prompt_eval_count", 0) or 0,
            output_tokens=resp.get("eval_count", 0) or 0,
            model=self._model,
            provider="ollama",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "ollama"
