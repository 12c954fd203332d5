"""Tests for the retry-with-validation harness."""

from __future__ import annotations

import pytest

from utils.exceptions import RetryValidationError, UpstreamGatewayError
from utils.retry import RetrySpec, retry_with_validation, run_attemptable


async def _no_sleep(_seconds: float) -> None:
    return None


@pytest.mark.asyncio
async def test_returns_success_after_two_thrown_errors() -> None:
    calls = {"task": 0}
    error_attempts = []
    validation_attempts = []

    async def _task() -> str:
        calls["task"] += 1
        if calls["task"] < 3:
            raise RuntimeError(f"boom {calls['task']}")
        return "ok"

    result = await retry_with_validation(
        _task,
        lambda value: value == "ok",
        max_attempts=3,
        on_error=lambda error, attempt: error_attempts.append(attempt),
        on_validation_failure=lambda value, attempt: validation_attempts.append(attempt),
        sleep=_no_sleep,
    )

    assert result == "ok"
    assert error_attempts == [1, 2]
    assert validation_attempts == []


@pytest.mark.asyncio
async def test_never_valid_result_raises_synthetic_validation_error() -> None:
    validation_attempts = []

    async def _task() -> dict:
        return {"valid": False}

    with pytest.raises(RetryValidationError) as excinfo:
        await retry_with_validation(
            _task,
            lambda value: False,
            max_attempts=2,
            on_validation_failure=lambda value, attempt: validation_attempts.append(attempt),
            sleep=_no_sleep,
        )

    assert str(excinfo.value) == "Validation failed after 2 attempts."
    assert excinfo.value.attempts == 2
    assert validation_attempts == [1, 2]


@pytest.mark.asyncio
async def test_single_attempt_message_is_singular() -> None:
    async def _task() -> int:
        return 0

    with pytest.raises(RetryValidationError, match=r"after 1 attempt\.$"):
        await retry_with_validation(_task, lambda value: False, max_attempts=1, sleep=_no_sleep)


@pytest.mark.asyncio
async def test_last_thrown_error_wins_over_later_validation_failures() -> None:
    calls = {"task": 0}

    async def _task() -> str:
        calls["task"] += 1
        if calls["task"] == 1:
            raise ValueError("first attempt exploded")
        return "still wrong"

    with pytest.raises(ValueError, match="first attempt exploded"):
        await retry_with_validation(_task, lambda value: False, max_attempts=3, sleep=_no_sleep)

    assert calls["task"] == 3


@pytest.mark.asyncio
async def test_abort_on_propagates_without_retrying() -> None:
    calls = {"task": 0}

    async def _task() -> str:
        calls["task"] += 1
        raise UpstreamGatewayError("html page")

    with pytest.raises(UpstreamGatewayError):
        await retry_with_validation(
            _task,
            lambda value: True,
            max_attempts=5,
            abort_on=(UpstreamGatewayError,),
            sleep=_no_sleep,
        )

    assert calls["task"] == 1


@pytest.mark.asyncio
async def test_delay_only_between_attempts() -> None:
    sleeps = []

    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    async def _task() -> int:
        return 1

    with pytest.raises(RetryValidationError):
        await retry_with_validation(
            _task,
            lambda value: False,
            max_attempts=3,
            delay=lambda attempt: attempt * 0.5,
            sleep=_sleep,
        )

    assert sleeps == [0.5, 1.0]


@pytest.mark.asyncio
async def test_validator_exception_counts_as_attempt_error() -> None:
    error_attempts = []

    async def _task() -> str:
        return "payload"

    def _validate(value: str) -> bool:
        raise KeyError("missing field")

    with pytest.raises(KeyError):
        await retry_with_validation(
            _task,
            _validate,
            max_attempts=2,
            on_error=lambda error, attempt: error_attempts.append(attempt),
            sleep=_no_sleep,
        )

    assert error_attempts == [1, 2]


@pytest.mark.asyncio
async def test_async_hooks_and_validator_are_awaited() -> None:
    seen = []

    async def _task() -> int:
        return len(seen)

    async def _validate(value: int) -> bool:
        return value >= 1

    async def _on_validation_failure(value: int, attempt: int) -> None:
        seen.append(attempt)

    result = await retry_with_validation(
        _task,
        _validate,
        max_attempts=3,
        on_validation_failure=_on_validation_failure,
        sleep=_no_sleep,
    )

    assert result == 1
    assert seen == [1]


class _CountingAttempt:
    def __init__(self) -> None:
        self.runs = 0

    async def run(self) -> int:
        self.runs += 1
        return self.runs

    async def is_valid(self, value: int) -> bool:
        return value == 2


@pytest.mark.asyncio
async def test_run_attemptable_uses_spec() -> None:
    attempt = _CountingAttempt()

    result = await run_attemptable(attempt, RetrySpec(max_attempts=3), sleep=_no_sleep)

    assert result == 2
    assert attempt.runs == 2


def test_retry_spec_rejects_zero_attempts() -> None:
    with pytest.raises(ValueError):
        RetrySpec(max_attempts=0)
