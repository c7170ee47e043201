"""
Tests for the generation retry policy.
"""

import pytest

from lesson_planner.agents.utils.retry_wrapper import RetryPolicy
from lesson_planner.core.exceptions import (
    CorpusUnavailable,
    CurriculumNotFound,
    GenerationFailed,
    MalformedOutput,
    MissingVariable,
    SessionNotFound,
    StageNotReady,
    is_retryable,
)


def make_policy(max_attempts=3, base_delay=1.0):
    sleeps = []

    async def record_sleep(seconds):
        sleeps.append(seconds)

    return RetryPolicy(max_attempts=max_attempts, base_delay=base_delay, sleep=record_sleep), sleeps


@pytest.mark.asyncio
async def test_exhausted_attempts_reraise_last_error():
    policy, sleeps = make_policy()
    attempts = []

    async def always_fails():
        attempts.append(1)
        raise MalformedOutput(f"bad sample {len(attempts)}")

    with pytest.raises(MalformedOutput, match="bad sample 3"):
        await policy.run(always_fails, label="test")

    assert len(attempts) == 3
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_success_after_transient_failure():
    policy, sleeps = make_policy()
    attempts = []

    async def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise GenerationFailed("429", status_code=429)
        return "ok"

    assert await policy.run(flaky) == "ok"
    assert len(attempts) == 2
    assert sleeps == [1.0]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        CurriculumNotFound(),
        CorpusUnavailable("science.csv", "file not found"),
        SessionNotFound("gone"),
        StageNotReady("1", "missing content"),
        ValueError("programming error"),
    ],
)
async def test_non_retryable_errors_fail_fast(error):
    policy, sleeps = make_policy()
    attempts = []

    async def fails():
        attempts.append(1)
        raise error

    with pytest.raises(type(error)):
        await policy.run(fails)

    assert len(attempts) == 1
    assert sleeps == []


def test_retryable_classification():
    assert is_retryable(GenerationFailed("x"))
    assert is_retryable(MalformedOutput("x"))
    assert is_retryable(MissingVariable("t", ["a"]))
    assert not is_retryable(CurriculumNotFound())
    assert not is_retryable(StageNotReady("0", "x"))


@pytest.mark.asyncio
async def test_plain_callable_returning_coroutine_is_awaited():
    policy, sleeps = make_policy()
    attempts = []

    async def flaky(value):
        attempts.append(value)
        if len(attempts) < 2:
            raise GenerationFailed("timeout")
        return {"corpus": value}

    result = await policy.run(lambda: flaky("science.csv"), label="index")

    assert result == {"corpus": "science.csv"}
    assert attempts == ["science.csv", "science.csv"]
    assert sleeps == [1.0]
