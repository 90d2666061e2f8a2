# src/pipeline/llm_factory.py — v1
"""LLM factory — creates per-stage LLM clients using config routing.

Resolves provider:model for each stage via the cascade in llm/config.py
(per-stage → default → fallback) and instantiates the adapter through
llm/client_factory.py.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from contentflow.llm.client_factory import create_llm_client
from contentflow.llm.config import resolve_llm

if TYPE_CHECKING:
    from contentflow.config.settings import Settings
    from contentflow.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)


class LLMFactory:
    """Create and cache LLM clients per stage.

    Clients are cached by (provider, model) key so stages sharing
    the same assignment reuse a single client instance.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._clients: dict[str, BaseLLMClient] = {}

    def get_client(self, stage: str) -> BaseLLMClient:
        """Get or create the LLM client routed to a stage."""
        assignment = resolve_llm(stage, self._settings)
        cache_key = assignment.key

        if cache_key not in self._clients:
            self._clients[cache_key] = create_llm_client(
                assignment.provider.lower(), assignment.model, self._settings,
            )
            logger.info(
                "Created LLM client for '%s': %s (source: %s)",
                stage, cache_key, assignment.source,
            )
        else:
            logger.debug("Reusing cached LLM client for '%s': %s", stage, cache_key)

        return self._clients[cache_key]

    def __call__(self, stage: str) -> BaseLLMClient:
        """Callable interface for PipelineExecutor.llm_factory."""
        return self.get_client(stage)
