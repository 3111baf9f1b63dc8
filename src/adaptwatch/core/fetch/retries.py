"""
Retry policy for notice-service requests, built on tenacity.

Waits grow exponentially between attempts. When the failed attempt
carries a ``retry_after`` hint (a 429 with a Retry-After header) the
wait is at least that long, capped at ``max_wait``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random_exponential,
)

from adaptwatch.core.logging import get_logger

if TYPE_CHECKING:
    from adaptwatch.core.config.models import SourceConfig

logger = get_logger("fetch")


@dataclass(frozen=True)
class RetryConfig:
    """Attempts and backoff for one logical request.

    Attributes:
        max_attempts: Total attempts, including the first
        min_wait: Shortest wait between attempts, in seconds
        max_wait: Longest wait between attempts, in seconds
        multiplier: Exponential backoff multiplier
        jitter: Randomise waits within the exponential window
        retry_exceptions: Exception types worth another attempt
    """

    max_attempts: int = 3
    min_wait: float = 1.0
    max_wait: float = 30.0
    multiplier: float = 2.0
    jitter: bool = True
    retry_exceptions: tuple[type[BaseException], ...] = (Exception,)

    @classmethod
    def from_source(
        cls,
        source: SourceConfig,
        retry_exceptions: tuple[type[BaseException], ...] = (Exception,),
    ) -> "RetryConfig":
        return cls(
            max_attempts=source.max_retries,
            multiplier=source.retry_backoff_factor,
            retry_exceptions=retry_exceptions,
        )

    def _wait(self, retry_state: RetryCallState) -> float:
        backoff_cls = wait_random_exponential if self.jitter else wait_exponential
        backoff = backoff_cls(multiplier=self.multiplier, min=self.min_wait, max=self.max_wait)
        seconds = backoff(retry_state)

        error = retry_state.outcome.exception() if retry_state.outcome else None
        hint = getattr(error, "retry_after", None)
        if hint:
            seconds = max(seconds, hint)
        return min(seconds, self.max_wait)

    def retrying(
        self, retry_on: tuple[type[BaseException], ...] | None = None
    ) -> AsyncRetrying:
        """AsyncRetrying controller that re-raises the last error once attempts run out."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=retry_if_exception_type(retry_on or self.retry_exceptions),
            before_sleep=_log_retry,
            reraise=True,
        )


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        "Attempt %d failed (%r), retrying in %.1fs",
        retry_state.attempt_number,
        error,
        delay,
    )
