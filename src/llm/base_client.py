# src/llm/base_client.py — v1
"""Abstract LLM client interface.

A client performs exactly one completion call per invocation. Failures of
any kind surface as CompletionError; retrying is the caller's decision.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from contentflow.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 8192,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Single-shot text completion.

        Raises:
            CompletionError: On transport failure, non-success status, or a
                response without usable text.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, anthropic, openai, ollama)."""
