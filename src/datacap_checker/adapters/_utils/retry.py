# _utils/retry.py

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from .backoff import backoff_delays

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhaustedError(RuntimeError):
    """
    Raised when an upstream call still fails after its full retry budget.

    The last underlying exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, attempts: int) -> None:
        super().__init__(f"{operation} failed after {attempts} attempts")
        self.operation = operation
        self.attempts = attempts


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    description: str = "upstream call",
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    delays: Iterable[float] | None = None,
) -> T:
    """
    Await ``operation`` until it succeeds or the attempt budget is spent.

    The first attempt runs immediately; subsequent attempts are spaced by the
    exponential backoff sequence. Exceptions not listed in ``retry_on``
    propagate unchanged.

    Args:
        operation: Zero-argument coroutine factory to call on each attempt.
        attempts: Total number of attempts, including the first.
        description: Human readable name used in logs and the raised error.
        retry_on: Exception types considered transient.
        delays: Optional explicit delay sequence, mainly for tests.

    Returns:
        T: The value returned by the first successful attempt.

    Raises:
        RetryExhaustedError: If every attempt failed with a transient error.
    """
    pauses = list(delays) if delays is not None else list(
        backoff_delays(attempts=max(attempts - 1, 0)),
    )
    schedule = [0.0, *pauses][:attempts]
    last_error: BaseException | None = None

    for attempt, delay in enumerate(schedule, start=1):
        if delay > 0:
            logger.debug(
                "RETRY: %s paused. Retrying in %.1fs (attempt %d/%d)",
                description,
                delay,
                attempt,
                attempts,
            )
            await asyncio.sleep(delay)

        try:
            return await operation()
        except retry_on as error:
            last_error = error
            logger.warning(
                "%s failed (attempt %d/%d): %s",
                description,
                attempt,
                attempts,
                error,
            )

    raise RetryExhaustedError(description, attempts) from last_error
