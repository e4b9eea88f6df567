"""Explicit retry policy and a generic async retry combinator."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from docvision.logging.logger import Log

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """Raised when every attempt allowed by a RetryPolicy failed transiently."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try and how long to wait between tries.

    `max_attempts` counts the first call. The delay after attempt `n`
    (1-based) grows linearly: `n * base_delay`.
    """

    max_attempts: int = 3
    base_delay: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")

    def backoff(self, attempt: int) -> float:
        return attempt * self.base_delay


async def retry(
    call: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    retry_on: tuple[type[BaseException], ...],
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> T:
    """Await `call()` until it succeeds or the policy runs out.

    Only exceptions in `retry_on` are retried; anything else propagates at once.

    Raises:
        RetryExhaustedError: when the last allowed attempt also failed with a
            retryable error.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await call()
        except retry_on as exc:
            if attempt >= policy.max_attempts:
                raise RetryExhaustedError(attempt, exc) from exc
            delay = policy.backoff(attempt)
            Log.warning(
                f"Attempt {attempt}/{policy.max_attempts} failed ({exc}); "
                f"retrying in {delay:.1f}s"
            )
            await (sleep or asyncio.sleep)(delay)
    raise AssertionError("unreachable")
