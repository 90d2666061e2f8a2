# src/core/errors.py — v1
"""Error taxonomy for the content pipeline.

Every stage failure ends with the owning StepRecord and Run marked failed;
these classes carry the human-readable message persisted on the record.
"""

from __future__ import annotations

INVALID_OUTPUT_MESSAGE = "Invalid output format"
PREVIEW_LIMIT = 500


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class MissingDependency(PipelineError):
    """A stage could not find a required earlier stage output."""

    def __init__(self, stage: str, dependency: str, reason: str = "") -> None:
        self.stage = stage
        self.dependency = dependency
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Stage '{stage}' requires output of '{dependency}'{detail}"
        )


class CompletionError(PipelineError):
    """A completion call failed (transport, status code, or response shape)."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)


class CompletionRetryExhausted(CompletionError):
    """Every completion attempt for a stage failed."""

    def __init__(self, stage: str, attempts: int, last_error: Exception) -> None:
        self.stage = stage
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(str(last_error), getattr(last_error, "provider", None))


class ExtractionFailed(PipelineError):
    """No JSON extraction strategy succeeded on the model output."""

    def __init__(self, text: str) -> None:
        self.preview = text[:PREVIEW_LIMIT]
        super().__init__(
            f"Failed to extract JSON from response. Text preview: {self.preview}"
        )


class ValidationFailed(PipelineError):
    """Parsed output does not satisfy the stage's structural schema."""

    def __init__(self, stage: str, detail: str | None = None) -> None:
        self.stage = stage
        self.detail = detail
        super().__init__(INVALID_OUTPUT_MESSAGE)


class StatusTransitionError(PipelineError):
    """A status update would move a run or step backwards."""


class RunNotFound(PipelineError):
    """No run exists with the requested identifier."""

    def __init__(self, run_id: str) -> None:
        self.run_id = run_id
        super().__init__(f"Run '{run_id}' not found")


class StepRecordMissing(PipelineError):
    """A run has no step record for a stage it must execute."""

    def __init__(self, run_id: str, stage: str) -> None:
        self.run_id = run_id
        self.stage = stage
        super().__init__(f"Run '{run_id}' has no step record for stage '{stage}'")


class StepNotFound(PipelineError):
    """No step record exists with the requested identifier."""

    def __init__(self, step_id: str) -> None:
        self.step_id = step_id
        super().__init__(f"Step record '{step_id}' not found")
