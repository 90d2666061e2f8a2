# tests/unit/llm/test_unit_client_factory.py — v1
"""Tests for llm/client_factory.py — provider name to adapter."""

from __future__ import annotations

import pytest

from contentflow.config.settings import Settings
from contentflow.llm import client_factory
from contentflow.llm.adapters.anthropic_adapter import AnthropicAdapter
from contentflow.llm.adapters.google_adapter import GoogleAdapter
from contentflow.llm.adapters.ollama_adapter import OllamaAdapter
from contentflow.llm.adapters.openai_adapter import OpenAIAdapter
from contentflow.llm.client_factory import (
    UnsupportedProviderError,
    available_providers,
    create_llm_client,
    register_provider,
)


class TestCreateLLMClient:
    def test_google(self):
        client = create_llm_client("google", "gemini-2.0-flash")
        assert isinstance(client, GoogleAdapter)
        assert client.provider_name == "google"

    def test_anthropic(self):
        assert isinstance(create_llm_client("anthropic", "claude-sonnet-4-20250514"), AnthropicAdapter)

    def test_openai(self):
        assert isinstance(create_llm_client("openai", "gpt-4o"), OpenAIAdapter)

    def test_ollama_uses_base_url(self):
        s = Settings(_env_file=None, ollama_base_url="http://gpu:11434")
        client = create_llm_client("ollama", "llama3", s)
        assert isinstance(client, OllamaAdapter)
        assert client._host == "http://gpu:11434"

    def test_api_key_from_settings(self):
        s = Settings(_env_file=None, google_api_key="g-key")
        client = create_llm_client("google", "gemini-2.0-flash", s)
        assert client._api_key == "g-key"

    def test_unsupported(self):
        with pytest.raises(UnsupportedProviderError, match="Available"):
            create_llm_client("mistral", "m")

    def test_available(self):
        assert available_providers() == ["anthropic", "google", "ollama", "openai"]


class TestRegisterProvider:
    def test_register_custom(self, monkeypatch):
        monkeypatch.setattr(client_factory, "_PROVIDER_REGISTRY", dict(client_factory._PROVIDER_REGISTRY))
        register_provider("gemini-alt", "contentflow.llm.adapters.google_adapter.GoogleAdapter")
        client = create_llm_client("gemini-alt", "gemini-pro")
        assert isinstance(client, GoogleAdapter)
