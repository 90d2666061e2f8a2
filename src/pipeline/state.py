# src/pipeline/state.py — v1
"""Outputs accumulated by one run, keyed by stage.

Outputs are stored as the plain JSON values the stages produced. Later
stages read them through require(), which re-validates against the
producing stage's schema so a consumer never indexes into a missing or
malformed structure.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from contentflow.core.errors import MissingDependency
from contentflow.core.models import StageType

M = TypeVar("M", bound=BaseModel)


class StageOutputs:
    """Per-run mapping of stage to validated output."""

    def __init__(self) -> None:
        self._outputs: dict[StageType, Any] = {}

    def record(self, stage: StageType, output: Any) -> None:
        self._outputs[stage] = output

    def get(self, stage: StageType) -> Any | None:
        return self._outputs.get(stage)

    def __contains__(self, stage: object) -> bool:
        return stage in self._outputs

    def __len__(self) -> int:
        return len(self._outputs)

    def require(self, stage: StageType, model: type[M], *, consumer: StageType) -> M:
        """Return the output of `stage` parsed as `model`.

        Raises:
            MissingDependency: If the output is absent or does not conform.
        """
        raw = self._outputs.get(stage)
        if raw is None:
            raise MissingDependency(consumer.value, stage.value, "output not available")
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise MissingDependency(
                consumer.value, stage.value, f"output does not conform ({e.error_count()} errors)"
            ) from e

    def as_dict(self) -> dict[str, Any]:
        """Outputs keyed by stage value, in execution order."""
        return {
            stage.value: self._outputs[stage]
            for stage in sorted(self._outputs, key=lambda s: s.position)
        }
