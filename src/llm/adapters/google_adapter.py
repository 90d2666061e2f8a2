# src/llm/adapters/google_adapter.py — v1
"""Google Gemini adapter implementing BaseLLMClient.

Uses the google-generativeai SDK. The response must carry
candidates[0].content.parts[0].text; anything else is a CompletionError.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from contentflow.core.errors import CompletionError
from contentflow.llm.base_client import BaseLLMClient
from contentflow.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)


class GoogleAdapter(BaseLLMClient):
    """Google Gemini adapter."""

    def __init__(self, model: str = "gemini-2.0-flash", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 8192,
        temperature: float = 0.7,
    ) -> LLMResponse:
        try:
            import google.generativeai as genai
        except ImportError as e:
            raise ImportError(
                "google-generativeai package required: pip install google-generativeai"
            ) from e

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=system)

        gen_config: dict[str, Any] = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }

        # Convert messages to Gemini format
        contents = []
        for m in messages:
            role = "model" if m.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": m.content}]})

        t0 = time.monotonic()
        try:
            resp = await model.generate_content_async(contents, generation_config=gen_config)
        except Exception as e:
            raise CompletionError(f"Gemini request failed: {e}", provider="google") from e
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=self._extract_text(resp),
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            model=self._model,
            provider="google",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "google"

    @staticmethod
    def _extract_text(resp: Any) -> str:
        """Return candidates[0].content.parts[0].text or raise CompletionError."""
        candidates = getattr(resp, "candidates", None)
        if not candidates:
            raise CompletionError("Invalid response format from Gemini: no candidates", provider="google")
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) if content is not None else None
        if not parts:
            raise CompletionError("Invalid response format from Gemini: no content parts", provider="google")
        text = getattr(parts[0], "text", None)
        if not isinstance(text, str) or not text:
            raise CompletionError("Invalid response format from Gemini: empty text", provider="google")
        return text
