"""Async retry helper with exponential backoff.

Used for any retried network I/O (cloud uploads, webhook deliveries).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """Raised when every attempt of a retried operation has failed."""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"Gave up after {attempts} attempt(s): {last_error}")
        self.attempts = attempts
        self.last_error = last_error


def backoff_delay(base_delay: float, attempt_index: int) -> float:
    """Return the delay before the retry that follows ``attempt_index``.

    ``attempt_index`` is zero-based, so the first retry waits ``base_delay``.
    """
    return base_delay * (2**attempt_index)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    base_delay: float,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    timeout: float | None = None,
    description: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds or ``attempts`` are used up.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt.
        attempts: Maximum number of attempts (at least 1).
        base_delay: Seconds to wait after the first failure; doubles each time.
        retry_on: Exception types that trigger another attempt. Anything else
            propagates immediately.
        timeout: Optional per-attempt timeout in seconds. A timeout counts as
            a retryable failure.
        description: Label used in log messages.
        sleep: Awaitable sleep function (injected by tests).

    Returns:
        The value returned by the first successful attempt.

    Raises:
        RetryExhaustedError: If every attempt failed.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    last_error: BaseException | None = None
    for attempt in range(attempts):
        try:
            if timeout is not None:
                return await asyncio.wait_for(operation(), timeout=timeout)
            return await operation()
        except (TimeoutError, *retry_on) as e:
            last_error = e
            if attempt + 1 >= attempts:
                break
            delay = backoff_delay(base_delay, attempt)
            logger.warning(
                f"{description} failed (attempt {attempt + 1}/{attempts}), "
                f"retrying in {delay:.2f}s: {e}"
            )
            await sleep(delay)

    logger.error(f"{description} failed after {attempts} attempt(s): {last_error}")
    raise RetryExhaustedError(attempts, last_error)
