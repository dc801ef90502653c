"""Fixed-delay bounded retry shared by the agent fetcher and the task launcher."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RetryOutcome(Generic[T]):
    """Either the operation's value or the error of its last attempt."""

    attempts: int
    value: T | None = None
    last_error: Exception | None = None

    @property
    def is_success(self) -> bool:
        return self.last_error is None

    def unwrap(self) -> T:
        """Return the value, or raise the last error if every attempt failed."""
        if self.last_error is not None:
            raise self.last_error
        return self.value  # type: ignore[return-value]


def retry_with_fixed_delay(
    operation: Callable[[], T],
    *,
    max_attempts: int,
    delay_seconds: float,
    is_retryable: Callable[[Exception], bool],
    sleep: Callable[[float], None] = time.sleep,
    label: str = "operation",
) -> RetryOutcome[T]:
    """Call ``operation`` until it returns, pausing ``delay_seconds`` between attempts.

    Errors rejected by ``is_retryable`` propagate unchanged. There is no pause
    after the final attempt.
    """

    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if delay_seconds < 0:
        raise ValueError(f"delay_seconds must be >= 0, got {delay_seconds}")

    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            return RetryOutcome(attempts=attempt, value=operation())
        except Exception as exc:  # noqa: BLE001
            if not is_retryable(exc):
                raise
            last_error = exc
        if attempt < max_attempts:
            logger.warning(
                "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                label,
                attempt,
                max_attempts,
                last_error,
                delay_seconds,
            )
            sleep(delay_seconds)

    logger.error("%s failed after %d attempts: %s", label, max_attempts, last_error)
    return RetryOutcome(attempts=max_attempts, last_error=last_error)
