# tests/unit/llm/test_unit_adapters.py — v1
"""Tests for llm/adapters — SDK calls are mocked, no network access."""

from __future__ import annotations

import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from contentflow.core.errors import CompletionError
from contentflow.llm.adapters.anthropic_adapter import AnthropicAdapter
from contentflow.llm.adapters.google_adapter import GoogleAdapter
from contentflow.llm.adapters.ollama_adapter import OllamaAdapter
from contentflow.llm.adapters.openai_adapter import OpenAIAdapter
from contentflow.llm.models import Message

MESSAGES = [Message(role="user", content="Recommend a genre")]


# === Google ===


def _gemini_response(text: str | None) -> SimpleNamespace:
    parts = [SimpleNamespace(text=text)] if text is not None else []
    return SimpleNamespace(
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))],
        usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=34),
    )


def _patched_genai(generate: AsyncMock):
    genai = MagicMock()
    genai.GenerativeModel.return_value.generate_content_async = generate
    google_pkg = MagicMock(generativeai=genai)
    return genai, patch.dict(sys.modules, {"google": google_pkg, "google.generativeai": genai})


class TestGoogleAdapter:
    @pytest.mark.asyncio
    async def test_complete(self):
        generate = AsyncMock(return_value=_gemini_response('{"ok": true}'))
        genai, patched = _patched_genai(generate)
        with patched:
            resp = await GoogleAdapter(model="gemini-2.0-flash", api_key="k").complete(
                MESSAGES, system="You are a strategist", max_tokens=100, temperature=0.2,
            )
        assert resp.content == '{"ok": true}'
        assert resp.provider == "google"
        assert resp.total_tokens == 46
        genai.configure.assert_called_once_with(api_key="k")
        genai.GenerativeModel.assert_called_once_with(
            "gemini-2.0-flash", system_instruction="You are a strategist",
        )
        contents = generate.await_args.args[0]
        assert contents == [{"role": "user", "parts": [{"text": "Recommend a genre"}]}]
        assert generate.await_args.kwargs["generation_config"] == {
            "max_output_tokens": 100, "temperature": 0.2,
        }

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self):
        _, patched = _patched_genai(AsyncMock(side_effect=RuntimeError("503 unavailable")))
        with patched, pytest.raises(CompletionError, match="503") as exc_info:
            await GoogleAdapter(api_key="k").complete(MESSAGES)
        assert exc_info.value.provider == "google"

    @pytest.mark.asyncio
    async def test_missing_parts_rejected(self):
        _, patched = _patched_genai(AsyncMock(return_value=_gemini_response(None)))
        with patched, pytest.raises(CompletionError, match="Invalid response format"):
            await GoogleAdapter(api_key="k").complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_no_candidates_rejected(self):
        resp = SimpleNamespace(candidates=[], usage_metadata=None)
        _, patched = _patched_genai(AsyncMock(return_value=resp))
        with patched, pytest.raises(CompletionError):
            await GoogleAdapter(api_key="k").complete(MESSAGES)

    def test_provider_name(self):
        assert GoogleAdapter().provider_name == "google"


# === Anthropic ===


def _anthropic_adapter(create: AsyncMock) -> AnthropicAdapter:
    adapter = AnthropicAdapter(model="claude-sonnet-4-20250514", api_key="k")
    client = MagicMock()
    client.messages.create = create
    adapter._AnthropicAdapter__client = client
    return adapter


class TestAnthropicAdapter:
    @pytest.mark.asyncio
    async def test_complete(self):
        response = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="hello")],
            usage=SimpleNamespace(input_tokens=5, output_tokens=7),
            model="claude-sonnet-4-20250514",
        )
        create = AsyncMock(return_value=response)
        resp = await _anthropic_adapter(create).complete(MESSAGES, system="sys")
        assert resp.content == "hello"
        assert resp.total_tokens == 12
        kwargs = create.await_args.kwargs
        assert kwargs["system"] == "sys"
        assert kwargs["max_tokens"] == 8192
        assert kwargs["messages"] == [{"role": "user", "content": "Recommend a genre"}]

    @pytest.mark.asyncio
    async def test_no_text_block(self):
        response = SimpleNamespace(
            content=[], usage=SimpleNamespace(input_tokens=1, output_tokens=0), model="m",
        )
        with pytest.raises(CompletionError, match="no text block"):
            await _anthropic_adapter(AsyncMock(return_value=response)).complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_error_wrapped(self):
        with pytest.raises(CompletionError) as exc_info:
            await _anthropic_adapter(AsyncMock(side_effect=RuntimeError("overloaded"))).complete(MESSAGES)
        assert exc_info.value.provider == "anthropic"


# === OpenAI ===


def _patched_openai(create: AsyncMock):
    module = MagicMock()
    module.AsyncOpenAI.return_value.chat.completions.create = create
    return patch.dict(sys.modules, {"openai": module})


class TestOpenAIAdapter:
    @pytest.mark.asyncio
    async def test_complete(self):
        resp = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="hi"))],
            usage=SimpleNamespace(prompt_tokens=3, completion_tokens=4),
        )
        create = AsyncMock(return_value=resp)
        with _patched_openai(create):
            result = await OpenAIAdapter(api_key="k").complete(MESSAGES, system="sys")
        assert result.content == "hi"
        assert result.total_tokens == 7
        messages = create.await_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "sys"}

    @pytest.mark.asyncio
    async def test_empty_choices(self):
        resp = SimpleNamespace(choices=[], usage=None)
        with _patched_openai(AsyncMock(return_value=resp)), pytest.raises(CompletionError):
            await OpenAIAdapter(api_key="k").complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_error_wrapped(self):
        with _patched_openai(AsyncMock(side_effect=RuntimeError("429"))), pytest.raises(CompletionError):
            await OpenAIAdapter(api_key="k").complete(MESSAGES)


# === Ollama ===


def _patched_ollama(chat: AsyncMock):
    module = MagicMock()
    module.AsyncClient.return_value.chat = chat
    return patch.dict(sys.modules, {"ollama": module})


class TestOllamaAdapter:
    @pytest.mark.asyncio
    async def test_complete(self):
        chat = AsyncMock(return_value={
            "message": {"content": "hi"}, "prompt_eval_count": 2, "eval_count": 3,
        })
        with _patched_ollama(chat):
            result = await OllamaAdapter(model="llama3").complete(MESSAGES, max_tokens=50)
        assert result.content == "hi"
        assert result.total_tokens == 5
        assert chat.await_args.kwargs["options"]["num_predict"] == 50

    @pytest.mark.asyncio
    async def test_missing_content(self):
        with _patched_ollama(AsyncMock(return_value={"done": True})), pytest.raises(CompletionError):
            await OllamaAdapter().complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(self):
        with _patched_ollama(AsyncMock(side_effect=ConnectionError("refused"))), pytest.raises(
            CompletionError, match="refused",
        ):
            await OllamaAdapter().complete(MESSAGES)
