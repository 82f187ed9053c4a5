"""Tests for the polling primitive."""

import datetime as _datetime
import time as _time
import typing as _typing

import pytest as _pytest

import questline.errors as errors
import questline.retry as retry


class Counter:
    """Produces 1, 2, 3, ... and optionally raises on chosen calls."""

    def __init__(self, fail_on: _typing.Iterable[int] = ()) -> None:
        self.calls = 0
        self._fail_on = set(fail_on)

    def __call__(self) -> int:
        self.calls += 1
        if self.calls in self._fail_on:
            raise ConnectionError(f"call {self.calls} failed")
        return self.calls


class TestRetryUntil:
    """Tests for retry_until."""

    def test_immediate_success_does_not_sleep(self) -> None:
        """A first value that satisfies returns without sleeping."""
        sleeps: list[float] = []
        counter = Counter()
        value = retry.retry_until(5, 1, counter, lambda v: v == 1, sleep=sleeps.append)
        assert value == 1
        assert counter.calls == 1
        assert sleeps == []

    def test_retries_until_condition_met(self) -> None:
        """Polling stops at the first acceptable value, sleeping the interval between."""
        counter = Counter()
        start = _time.monotonic()
        value = retry.retry_until(
            _datetime.timedelta(seconds=2),
            _datetime.timedelta(milliseconds=100),
            counter,
            lambda v: v >= 3,
        )
        elapsed = _time.monotonic() - start
        assert value == 3
        assert counter.calls == 3
        assert elapsed >= 0.2

    def test_errors_count_as_not_yet(self) -> None:
        """An exception from the producer is retried."""
        sleeps: list[float] = []
        counter = Counter(fail_on=[1, 2])
        value = retry.retry_until(10, 0.5, counter, lambda v: True, sleep=sleeps.append)
        assert value == 3
        assert sleeps == [0.5, 0.5]

    def test_timeout_carries_last_value(self) -> None:
        """On timeout the last produced value is reported."""
        counter = Counter()
        with _pytest.raises(errors.RetryTimeoutError) as exc_info:
            retry.retry_until(0.25, 0.1, counter, lambda v: False)
        error = exc_info.value
        assert 2 <= error.attempts <= 5
        assert error.attempts == counter.calls
        assert error.last_value == counter.calls
        assert error.last_error is None
        assert isinstance(error, TimeoutError)

    def test_timeout_chains_last_error(self) -> None:
        """When the final attempt raised, that error is the cause."""

        def _always_fails() -> int:
            raise ConnectionError("refused")

        with _pytest.raises(errors.RetryTimeoutError) as exc_info:
            retry.retry_until(0.15, 0.05, _always_fails, lambda v: True)
        error = exc_info.value
        assert isinstance(error.last_error, ConnectionError)
        assert error.__cause__ is error.last_error
        assert "refused" in str(error)

    def test_no_attempt_starts_after_deadline(self) -> None:
        """An interval longer than max_wait is cut short at the deadline."""
        slept: list[float] = []
        starts: list[float] = []

        def _sleep(seconds: float) -> None:
            slept.append(seconds)
            _time.sleep(seconds)

        def _produce() -> bool:
            starts.append(_time.monotonic())
            return False

        begin = _time.monotonic()
        with _pytest.raises(errors.RetryTimeoutError) as exc_info:
            retry.retry_until(0.1, 0.5, _produce, lambda v: v, sleep=_sleep)

        assert exc_info.value.attempts == len(starts) >= 2
        assert all(0 <= s <= 0.1 for s in slept)
        assert all(start - begin <= 0.1 + 0.05 for start in starts)
        assert _time.monotonic() - begin < 0.5

    def test_zero_wait_makes_one_attempt(self) -> None:
        """max_wait of zero still evaluates the first attempt."""
        counter = Counter()
        with _pytest.raises(errors.RetryTimeoutError) as exc_info:
            retry.retry_until(0, 0, counter, lambda v: False)
        assert exc_info.value.attempts == 1
        assert counter.calls == 1

    def test_negative_durations_rejected(self) -> None:
        """Negative waits are a usage error."""
        with _pytest.raises(ValueError):
            retry.retry_until(-1, 0, Counter(), lambda v: True)
        with _pytest.raises(ValueError):
            retry.retry_until(1, _datetime.timedelta(seconds=-1), Counter(), lambda v: True)


class TestRetryCondition:
    """Tests for RetryCondition."""

    def test_pairs_function_and_condition(self) -> None:
        """function maps a service to a value, condition judges it."""
        condition = retry.RetryCondition(lambda service: service["status"], lambda s: s == "ready")
        service = {"status": "ready"}
        assert condition.condition(condition.function(service))
