"""Caller-side retry policy for remote survey operations.

The search and enrichment components surface every failure immediately;
whether to try again is a decision of the code that drives them. This module
holds that decision: only errors flagged ``retryable`` (timeouts, 429, 5xx,
dropped connections) are retried, with exponential backoff via tenacity.
``AuthError`` and ``ValidationError`` are never retryable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..config.schemas import RetryConfig
from ..exceptions import is_retryable


T = TypeVar("T")


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(f"Retrying after attempt {state.attempt_number} failed: {exc}")


def build_retrying(policy: RetryConfig) -> Retrying:
    """Build a tenacity Retrying object from a RetryConfig."""
    return Retrying(
        stop=stop_after_attempt(policy.attempts + 1),
        wait=wait_exponential(
            multiplier=policy.backoff_seconds,
            exp_base=policy.backoff_multiplier,
            max=policy.max_backoff_seconds,
        ),
        retry=retry_if_exception(is_retryable),
        before_sleep=_log_retry,
        reraise=True,
    )


def call_with_retry(
    func: Callable[..., T], policy: RetryConfig | None = None, *args: Any, **kwargs: Any
) -> T:
    """Call ``func`` under the retry policy; with no policy (or 0 attempts) call once."""
    if policy is None or policy.attempts <= 0:
        return func(*args, **kwargs)
    return build_retrying(policy)(func, *args, **kwargs)
