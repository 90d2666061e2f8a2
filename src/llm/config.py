# src/llm/config.py — v1
"""Per-stage LLM routing with cascade resolution.

Resolution order:
  1. Per-stage setting (LLM_COPY_GENERATION=openai:gpt-4o)
  2. Default provider + model (LLM_DEFAULT_PROVIDER + LLM_DEFAULT_MODEL)
  3. Hardcoded fallback (google:gemini-2.0-flash)
"""

from __future__ import annotations

from dataclasses import dataclass

from contentflow.config.settings import Settings
from contentflow.core.models import STAGE_SEQUENCE

_FALLBACK_PROVIDER = "google"
_FALLBACK_MODEL = "gemini-2.0-flash"


@dataclass(frozen=True)
class LLMAssignment:
    """Resolved LLM provider:model for a stage."""

    provider: str
    model: str
    source: str  # "stage", "default", or "fallback"

    @property
    def key(self) -> str:
        """Return 'provider:model' string."""
        return f"{self.provider}:{self.model}"


def _parse_assignment(value: str) -> tuple[str, str] | None:
    """Parse 'provider:model' string. Returns None if empty."""
    if not value or ":" not in value:
        return None
    provider, model = value.split(":", 1)
    return (provider.strip(), model.strip())


def resolve_llm(stage: str, settings: Settings) -> LLMAssignment:
    """Resolve the LLM assignment for a stage.

    Args:
        stage: Stage name (e.g. "market_research").
        settings: Application settings.

    Returns:
        Resolved LLMAssignment with provider, model, and resolution source.
    """
    parsed = _parse_assignment(getattr(settings, f"llm_{stage}", ""))
    if parsed:
        return LLMAssignment(provider=parsed[0], model=parsed[1], source="stage")

    if settings.llm_default_provider and settings.llm_default_model:
        return LLMAssignment(
            provider=settings.llm_default_provider,
            model=settings.llm_default_model,
            source="default",
        )

    return LLMAssignment(
        provider=_FALLBACK_PROVIDER,
        model=_FALLBACK_MODEL,
        source="fallback",
    )


def resolve_all(settings: Settings) -> dict[str, LLMAssignment]:
    """Resolve LLM assignments for every stage, in execution order."""
    return {stage.value: resolve_llm(stage.value, settings) for stage in STAGE_SEQUENCE}
