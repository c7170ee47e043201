"""
Retry policy for generation sub-steps.
Bounded attempts with exponential backoff, applied uniformly by the orchestrator.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from lesson_planner.config import settings
from lesson_planner.core.exceptions import is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """
    max_attempts: total attempts including the first
    base_delay: wait before the second attempt; doubles after each failure
    retryable: predicate deciding which errors are worth another attempt
    sleep: awaitable sleep, replaceable in tests
    """

    max_attempts: int = field(default_factory=lambda: settings.retry_max_attempts)
    base_delay: float = field(default_factory=lambda: settings.retry_base_delay_seconds)
    retryable: Callable[[BaseException], bool] = is_retryable
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def _log_retry(self, label: str) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            wait = retry_state.next_action.sleep if retry_state.next_action else 0
            logger.warning(
                f"⚠️  Attempt {retry_state.attempt_number}/{self.max_attempts} failed for {label}. "
                f"Retrying in {wait:.1f}s: {error}"
            )

        return before_sleep

    async def run(self, func: Callable[[], Awaitable[T]], label: str = "step") -> T:
        """
        Await func until it succeeds, a non-retryable error occurs, or attempts run out.
        The last error is re-raised unchanged.
        """

        async def attempt() -> T:
            return await func()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=2, min=0),
            retry=retry_if_exception(self.retryable),
            before_sleep=self._log_retry(label),
            sleep=self.sleep,
            reraise=True,
        )
        try:
            result = await retrying(attempt)
        except Exception as e:
            logger.error(f"❌ {label} failed: {e}")
            raise
        return result
