# _utils/test_retry.py

import pytest

from datacap_checker.adapters._utils import RetryExhaustedError, retry_async

pytestmark = pytest.mark.unit


class _Flaky:
    """
    Coroutine factory failing a fixed number of times before succeeding.
    """

    def __init__(self, failures: int, error: Exception | None = None) -> None:
        self.failures = failures
        self.error = error or ConnectionError("boom")
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


async def test_retry_returns_first_success() -> None:
    """
    ARRANGE: operation that succeeds immediately
    ACT:     retry_async
    ASSERT:  returns the value after a single call
    """
    operation = _Flaky(failures=0)

    actual = await retry_async(operation, attempts=3, delays=[0.0, 0.0])

    assert (actual, operation.calls) == ("ok", 1)


async def test_retry_recovers_after_transient_failures() -> None:
    """
    ARRANGE: operation failing twice then succeeding
    ACT:     retry_async with three attempts
    ASSERT:  returns the value on the third call
    """
    operation = _Flaky(failures=2)

    actual = await retry_async(operation, attempts=3, delays=[0.0, 0.0])

    assert (actual, operation.calls) == ("ok", 3)


async def test_retry_raises_when_budget_spent() -> None:
    """
    ARRANGE: operation that always fails
    ACT:     retry_async with three attempts
    ASSERT:  raises RetryExhaustedError
    """
    operation = _Flaky(failures=10)

    with pytest.raises(RetryExhaustedError):
        await retry_async(operation, attempts=3, delays=[0.0, 0.0])


async def test_retry_stops_at_attempt_budget() -> None:
    """
    ARRANGE: operation that always fails
    ACT:     retry_async with three attempts
    ASSERT:  operation called exactly three times
    """
    operation = _Flaky(failures=10)

    with pytest.raises(RetryExhaustedError):
        await retry_async(operation, attempts=3, delays=[0.0, 0.0])

    assert operation.calls == 3


async def test_retry_chains_last_error() -> None:
    """
    ARRANGE: operation that always raises ConnectionError
    ACT:     retry_async
    ASSERT:  exhausted error carries the ConnectionError as its cause
    """
    operation = _Flaky(failures=10)

    with pytest.raises(RetryExhaustedError) as raised:
        await retry_async(operation, attempts=2, delays=[0.0])

    assert isinstance(raised.value.__cause__, ConnectionError)


async def test_retry_error_records_operation_and_attempts() -> None:
    """
    ARRANGE: always-failing operation with a description
    ACT:     retry_async
    ASSERT:  error exposes the description and attempt count
    """
    operation = _Flaky(failures=10)

    with pytest.raises(RetryExhaustedError) as raised:
        await retry_async(operation, attempts=2, description="lookup", delays=[0.0])

    assert (raised.value.operation, raised.value.attempts) == ("lookup", 2)


async def test_retry_propagates_unlisted_errors() -> None:
    """
    ARRANGE: operation raising KeyError while only ConnectionError is retried
    ACT:     retry_async
    ASSERT:  KeyError propagates after one call
    """
    operation = _Flaky(failures=10, error=KeyError("missing"))

    with pytest.raises(KeyError):
        await retry_async(
            operation,
            attempts=3,
            retry_on=(ConnectionError,),
            delays=[0.0, 0.0],
        )

    assert operation.calls == 1
