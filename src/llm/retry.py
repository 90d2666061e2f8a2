# src/llm/retry.py — v1
"""Per-stage retry policy for completion calls.

Retries use a constant delay between attempts, not exponential backoff.
Only CompletionError is retried; anything else propagates immediately.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from contentflow.core.errors import CompletionError, CompletionRetryExhausted
from contentflow.logging.context import set_stage_context

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY_S = 2.0


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed retry budget and inter-attempt delay."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_s: float = DEFAULT_DELAY_S

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay_s < 0:
            raise ValueError("delay_s must be >= 0")


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    stage: str = "unknown",
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    **kwargs: Any,
) -> Any:
    """Execute an async completion call with fixed-delay retry.

    Raises:
        CompletionRetryExhausted: If every attempt raised CompletionError.
    """
    policy = policy or RetryPolicy()

    for attempt in range(1, policy.max_attempts + 1):
        set_stage_context(stage, attempt)
        logger.debug("Stage '%s' completion attempt %d/%d", stage, attempt, policy.max_attempts)
        try:
            return await fn(*args, **kwargs)
        except CompletionError as e:
            logger.warning(
                "Stage '%s' completion failed (attempt %d/%d): %s",
                stage, attempt, policy.max_attempts, e,
            )
            if attempt == policy.max_attempts:
                set_stage_context(stage)
                logger.error("Stage '%s' failed after %d attempts", stage, policy.max_attempts)
                raise CompletionRetryExhausted(stage, policy.max_attempts, e) from e
            await sleep(policy.delay_s)
