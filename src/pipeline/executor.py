# src/pipeline/executor.py — v1
"""Pipeline executor — run the eight stages of a Run in fixed order.

For each stage: mark the step Running, build the prompt from earlier
outputs, call the routed LLM with fixed-delay retry, parse and validate
the reply, then persist Completed with its output. Any stage failure
marks the step and the Run Failed and leaves later steps Pending.

Distinct Runs may execute concurrently; each run_pipeline call owns its
own StageOutputs and nothing mutable is shared between runs.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from contentflow.core.errors import (
    CompletionRetryExhausted,
    RunNotFound,
    StatusTransitionError,
    StepRecordMissing,
    ValidationFailed,
)
from contentflow.core.models import STAGE_SEQUENCE, RunStatus, StepRecord, StepStatus, utc_now
from contentflow.llm.models import LLMResponse, Message
from contentflow.llm.retry import RetryPolicy, with_retry
from contentflow.logging.context import clear_context, set_run_context, set_stage_context
from contentflow.pipeline.plugin_kit.base_agent import prompt_hash
from contentflow.pipeline.plugin_kit.models import AgentMetadata, ParseFailure
from contentflow.pipeline.registry import AgentRegistry, RegistryError
from contentflow.pipeline.state import StageOutputs

if TYPE_CHECKING:
    from contentflow.config.settings import Settings
    from contentflow.llm.base_client import BaseLLMClient
    from contentflow.pipeline.plugin_kit.base_agent import BaseAgent
    from contentflow.storage.base_run_store import BaseRunStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 8192
DEFAULT_TEMPERATURE = 0.7


@dataclass
class RunResult:
    """Result of a full pipeline run."""

    run_id: str
    success: bool = True
    completed_stages: list[str] = field(default_factory=list)
    failed_stage: str | None = None
    error: str | None = None
    duration_ms: int = 0
    outputs: dict[str, Any] = field(default_factory=dict)


class PipelineExecutor:
    """Execute the stage sequence of a Run against a run store.

    Args:
        store: Persistence port for runs and step records.
        registry: Loaded AgentRegistry; must cover every stage.
        llm_factory: Callable(stage_name) -> BaseLLMClient, or a single
            client shared by all stages. Defaults to LLMFactory(settings).
        settings: Application settings (retry policy, generation params).
        sleep: Awaitable used between retry attempts.
    """

    def __init__(
        self,
        store: BaseRunStore,
        registry: AgentRegistry | None = None,
        llm_factory: Any = None,
        settings: Settings | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._registry = registry or AgentRegistry.default()
        self._sleep = sleep

        missing = self._registry.missing_stages()
        if missing:
            raise RegistryError(
                "No agent registered for: " + ", ".join(s.value for s in missing)
            )
        dependency_errors = self._registry.validate_dependencies()
        if dependency_errors:
            raise RegistryError("; ".join(dependency_errors))

        if settings is not None:
            self._policy = RetryPolicy(
                max_attempts=settings.pipeline_retry_attempts,
                delay_s=settings.pipeline_retry_delay_s,
            )
            self._max_tokens = settings.llm_max_tokens
            self._temperature = settings.llm_temperature
        else:
            self._policy = RetryPolicy()
            self._max_tokens = DEFAULT_MAX_TOKENS
            self._temperature = DEFAULT_TEMPERATURE

        if llm_factory is None and settings is not None:
            from contentflow.pipeline.llm_factory import LLMFactory
            llm_factory = LLMFactory(settings)
        self._llm_factory = llm_factory

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._policy

    async def run_pipeline(self, run_id: str) -> RunResult:
        """Execute every stage of a run in STAGE_SEQUENCE order.

        Raises:
            RunNotFound: If the run does not exist. Stage failures are
                reported in the RunResult, not raised.
        """
        run = await self._store.get_run(run_id)
        if run is None:
            raise RunNotFound(run_id)

        start_ns = time.monotonic_ns()
        result = RunResult(run_id=run_id)
        outputs = StageOutputs()
        set_run_context(run_id)

        # A run already running or finished belongs to another invocation.
        try:
            await self._store.update_run(run_id, RunStatus.RUNNING)
        except StatusTransitionError as exc:
            logger.error("Run '%s' not started: %s", run.name, exc)
            clear_context()
            result.success = False
            result.error = str(exc)
            result.duration_ms = (time.monotonic_ns() - start_ns) // 1_000_000
            return result

        try:
            steps = {s.stage: s for s in await self._store.get_steps_by_run(run_id)}
            logger.info("Run '%s' started (%d stages)", run.name, len(STAGE_SEQUENCE))

            for index, stage in enumerate(STAGE_SEQUENCE):
                logger.info("Stage %d/%d: executing %s", index + 1, len(STAGE_SEQUENCE), stage.value)
                step = steps.get(stage)
                if step is None:
                    raise StepRecordMissing(run_id, stage.value)
                try:
                    output = await self.run_step(step, outputs, run.initial_payload)
                except Exception:
                    result.failed_stage = stage.value
                    raise
                outputs.record(stage, output)
                result.completed_stages.append(stage.value)

            await self._store.update_run(run_id, RunStatus.COMPLETED, completed_at=utc_now())
        except Exception as exc:
            result.success = False
            result.error = _failure_message(exc)
            logger.error(
                "Run failed at stage '%s': %s", result.failed_stage or "-", result.error,
            )
            await self._mark_run_failed(run_id)
        finally:
            result.duration_ms = (time.monotonic_ns() - start_ns) // 1_000_000
            result.outputs = outputs.as_dict()
            clear_context()

        if result.success:
            logger.info(
                "Pipeline complete: %d stages, %dms", len(result.completed_stages), result.duration_ms,
            )
        return result

    async def run_step(
        self,
        step: StepRecord,
        outputs: StageOutputs,
        initial_payload: dict[str, Any],
    ) -> Any:
        """Execute a single stage and persist its outcome.

        Returns:
            The validated output (a JSON value).

        Raises:
            MissingDependency: An earlier output is absent or malformed.
            CompletionRetryExhausted: Every completion attempt failed.
            ValidationFailed: The reply did not satisfy the stage schema.
        """
        agent = self._registry.get_or_raise(step.stage)
        stage = step.stage.value
        set_stage_context(stage)
        start_ns = time.monotonic_ns()

        await self._store.update_step(step.id, StepStatus.RUNNING)
        calls = 0

        async def _complete(prompt: str) -> LLMResponse:
            nonlocal calls
            calls += 1
            return await self._get_llm(stage).complete(
                [Message(role="user", content=prompt)],
                system=agent.system_prompt,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )

        try:
            prompt = agent.format_input(outputs, initial_payload)
            digest = prompt_hash(prompt)
            await self._store.update_step(
                step.id,
                StepStatus.RUNNING,
                input={**(step.input or {}), "prompt": prompt, "prompt_hash": digest},
            )

            response = await with_retry(
                _complete, prompt, stage=stage, policy=self._policy, sleep=self._sleep,
            )
            set_stage_context(stage)

            output = agent.parse_output(response.content)
            if not agent.validate_output(output):
                detail = output.preview if isinstance(output, ParseFailure) else None
                raise ValidationFailed(stage, detail)
        except Exception as exc:
            await self._mark_step_failed(step, exc)
            raise

        await self._store.update_step(
            step.id, StepStatus.COMPLETED, output=output, completed_at=utc_now(),
        )
        self._log_completion(agent, response, calls, digest, start_ns)
        return output

    # --- Internal helpers ---

    def _get_llm(self, stage: str) -> BaseLLMClient:
        """Get LLM client for a specific stage."""
        if self._llm_factory is not None:
            if callable(self._llm_factory) and not hasattr(self._llm_factory, "complete"):
                return self._llm_factory(stage)
            return self._llm_factory
        raise RuntimeError(f"No LLM factory configured for stage '{stage}'")

    async def _mark_step_failed(self, step: StepRecord, exc: Exception) -> None:
        try:
            await self._store.update_step(
                step.id,
                StepStatus.FAILED,
                error=_failure_message(exc),
                completed_at=utc_now(),
            )
        except Exception as persist_exc:
            logger.error(
                "Could not persist failure of step '%s': %s", step.stage.value, persist_exc,
            )

    async def _mark_run_failed(self, run_id: str) -> None:
        try:
            await self._store.update_run(run_id, RunStatus.FAILED, completed_at=utc_now())
        except Exception as persist_exc:
            logger.error("Could not persist failure of run '%s': %s", run_id, persist_exc)

    @staticmethod
    def _log_completion(
        agent: BaseAgent,
        response: LLMResponse,
        calls: int,
        digest: str,
        start_ns: int,
    ) -> None:
        metadata = AgentMetadata(
            agent_name=agent.name,
            agent_version=agent.version,
            execution_time_ms=(time.monotonic_ns() - start_ns) // 1_000_000,
            llm_calls=calls,
            tokens_used=response.total_tokens,
            prompt_hash=digest,
        )
        logger.info(
            "Stage '%s' completed: calls=%d, tokens=%d, time=%dms",
            metadata.agent_name,
            metadata.llm_calls,
            metadata.tokens_used,
            metadata.execution_time_ms,
            extra={"data": metadata.model_dump()},
        )


def _failure_message(exc: Exception) -> str:
    """Human-readable message persisted on the failed record."""
    if isinstance(exc, CompletionRetryExhausted):
        return str(exc.last_error) or type(exc.last_error).__name__
    return str(exc) or type(exc).__name__
