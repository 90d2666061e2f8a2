# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "google"
    llm_default_model: str = "gemini-2.0-flash"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 8192

    # Provider API keys
    google_api_key: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # Per-stage LLM assignment ("provider:model", highest priority)
    llm_market_research: str = ""
    llm_content_scraping: str = ""
    llm_nlp_classification: str = ""
    llm_template_optimization: str = ""
    llm_business_strategy: str = ""
    llm_content_creation: str = ""
    llm_copy_generation: str = ""
    llm_optimization_archive: str = ""

    # === Pipeline ===
    pipeline_retry_attempts: int = 3
    pipeline_retry_delay_s: float = 2.0

    # === Run store ===
    store_backend: Literal["sqlite", "memory"] = "sqlite"
    database_path: Path = Path("~/.contentflow/contentflow.db")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("pipeline_retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("pipeline_retry_attempts must be >= 1")
        return v

    @field_validator("pipeline_retry_delay_s")
    @classmethod
    def validate_retry_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("pipeline_retry_delay_s must be >= 0")
        return v

    @field_validator("llm_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("llm_temperature must be within [0, 2]")
        return v

    @field_validator("llm_max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("llm_max_tokens must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        for attr in self.stage_override_fields:
            value = getattr(self, attr)
            if value and ":" not in value:
                errors.append(
                    f"{attr.upper()} must use the 'provider:model' format, got {value!r}"
                )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def stage_override_fields(self) -> list[str]:
        """Names of the per-stage LLM override fields."""
        return [
            name for name in type(self).model_fields
            if name.startswith("llm_") and name not in _NON_STAGE_LLM_FIELDS
        ]

    def api_key_for(self, provider: str) -> str:
        """Return the configured API key for a provider ('' when unset)."""
        return {
            "google": self.google_api_key,
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
        }.get(provider, "")


_NON_STAGE_LLM_FIELDS = frozenset({
    "llm_default_provider",
    "llm_default_model",
    "llm_temperature",
    "llm_max_tokens",
})


def load_settings(require_api_key: bool = False, **overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        require_api_key: Fail when the default provider needs a key and none
            is configured (ollama never needs one).
        **overrides: Field-level overrides (for testing or per-run config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    settings = Settings(**overrides)  # type: ignore[arg-type]
    provider = settings.llm_default_provider
    if require_api_key and provider != "ollama" and not settings.api_key_for(provider):
        raise ConfigurationError(
            f"{provider.upper()}_API_KEY must be set when LLM_DEFAULT_PROVIDER={provider}"
        )
    return settings
