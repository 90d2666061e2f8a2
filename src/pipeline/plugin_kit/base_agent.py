# src/pipeline/plugin_kit/base_agent.py — v1
"""Standard stage interface for pipeline plugins.

A stage turns the outputs of earlier stages into a prompt, and decides
whether the model's reply is acceptable. It never calls the model itself;
the executor owns completion, retry, and persistence.
"""

from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from contentflow.core.errors import ExtractionFailed
from contentflow.core.models import StageType
from contentflow.pipeline.json_extractor import extract_json
from contentflow.pipeline.plugin_kit.models import ParseFailure
from contentflow.pipeline.state import StageOutputs

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


class BaseAgent(ABC):
    """Standard interface for all pipeline stages."""

    def __init__(self) -> None:
        self._prompt_template: str | None = None

    @property
    @abstractmethod
    def stage(self) -> StageType:
        """Stage this agent implements."""

    @property
    def name(self) -> str:
        """Unique agent identifier (the stage value)."""
        return self.stage.value

    @property
    @abstractmethod
    def version(self) -> str:
        """Agent version (semver)."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this agent does."""

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """Fixed instruction sent alongside every prompt of this stage."""

    @property
    @abstractmethod
    def output_schema(self) -> type[BaseModel]:
        """Pydantic model a valid output must satisfy."""

    @property
    def dependencies(self) -> list[StageType]:
        """Stages whose outputs this one reads."""
        return []

    @property
    def prompt_file(self) -> str | None:
        """Path to prompt template file."""
        return str(PROMPTS_DIR / f"{self.stage.value}.txt")

    @abstractmethod
    def format_input(self, outputs: StageOutputs, initial_payload: dict[str, Any]) -> str:
        """Build the user prompt.

        Raises:
            MissingDependency: If a required earlier output is absent or
                malformed.
        """

    def parse_output(self, raw_text: str) -> Any:
        """Extract JSON from the model reply; ParseFailure when none found."""
        try:
            return extract_json(raw_text)
        except ExtractionFailed as e:
            logger.warning("Stage '%s': %s", self.name, e)
            return ParseFailure(preview=e.preview)

    def validate_output(self, candidate: Any) -> bool:
        """Return True when candidate conforms to output_schema."""
        if not isinstance(candidate, dict) or not candidate:
            return False
        try:
            self.output_schema.model_validate(candidate)
        except ValidationError as e:
            logger.info(
                "Stage '%s' output rejected: %d validation errors, first at %s",
                self.name, e.error_count(), _location(e),
            )
            return False
        return True

    # --- Prompt helpers ---

    def _load_prompt(self) -> str:
        if self._prompt_template is None:
            self._prompt_template = Path(self.prompt_file).read_text(encoding="utf-8")
        return self._prompt_template

    def _render(self, **values: Any) -> str:
        return self._load_prompt().format(**values)


def prompt_hash(prompt: str) -> str:
    """Short stable fingerprint of a rendered prompt."""
    return hashlib.sha256(prompt.encode("utf-8")).hexdigest()[:16]


def _location(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return "?"
    return ".".join(str(part) for part in errors[0]["loc"]) or "<root>"
