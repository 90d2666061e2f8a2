# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from contentflow.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_provider(self):
        s = Settings(_env_file=None)
        assert s.llm_default_provider == "google"
        assert s.llm_default_model == "gemini-2.0-flash"

    def test_default_generation_params(self):
        s = Settings(_env_file=None)
        assert s.llm_max_tokens == 8192
        assert s.llm_temperature == 0.7

    def test_default_retry(self):
        s = Settings(_env_file=None)
        assert s.pipeline_retry_attempts == 3
        assert s.pipeline_retry_delay_s == 2.0

    def test_default_store(self):
        s = Settings(_env_file=None)
        assert s.store_backend == "sqlite"
        assert s.database_path == Path("~/.contentflow/contentflow.db")

    def test_stage_overrides_empty(self):
        s = Settings(_env_file=None)
        assert len(s.stage_override_fields) == 8
        assert all(getattr(s, f) == "" for f in s.stage_override_fields)


class TestSettingsValidation:
    def test_stage_override_needs_provider_prefix(self):
        with pytest.raises(ConfigurationError, match="LLM_COPY_GENERATION"):
            Settings(_env_file=None, llm_copy_generation="gpt-4o")

    def test_valid_stage_override(self):
        s = Settings(_env_file=None, llm_copy_generation="openai:gpt-4o")
        assert s.llm_copy_generation == "openai:gpt-4o"

    def test_retry_attempts_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, pipeline_retry_attempts=0)

    def test_retry_delay_non_negative(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, pipeline_retry_delay_s=-1)

    def test_temperature_range(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, llm_temperature=3.0)

    def test_invalid_store_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, store_backend="redis")


class TestEnvLoading:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        monkeypatch.setenv("PIPELINE_RETRY_ATTEMPTS", "5")
        s = Settings(_env_file=None)
        assert s.google_api_key == "g-key"
        assert s.pipeline_retry_attempts == 5

    def test_reads_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("LLM_DEFAULT_PROVIDER=anthropic\nLOG_FORMAT=text\n", encoding="utf-8")
        s = Settings(_env_file=env)
        assert s.llm_default_provider == "anthropic"
        assert s.log_format == "text"


class TestApiKeyFor:
    def test_known_providers(self):
        s = Settings(_env_file=None, google_api_key="g", openai_api_key="o")
        assert s.api_key_for("google") == "g"
        assert s.api_key_for("openai") == "o"
        assert s.api_key_for("anthropic") == ""

    def test_unknown_provider(self):
        assert Settings(_env_file=None).api_key_for("ollama") == ""


class TestLoadSettings:
    def test_overrides(self):
        s = load_settings(_env_file=None, llm_max_tokens=1024)
        assert s.llm_max_tokens == 1024

    def test_missing_key_rejected(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="GOOGLE_API_KEY"):
            load_settings(require_api_key=True, _env_file=None)

    def test_key_present(self):
        s = load_settings(require_api_key=True, _env_file=None, google_api_key="g")
        assert s.google_api_key == "g"

    def test_ollama_needs_no_key(self):
        s = load_settings(require_api_key=True, _env_file=None, llm_default_provider="ollama")
        assert s.llm_default_provider == "ollama"
