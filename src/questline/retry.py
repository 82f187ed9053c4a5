"""
Polling primitive with a bounded wait and a fixed interval.

retry_until() calls a producer until a predicate accepts its value. Errors
raised by the producer count as "not yet" and are retried; only when the
maximum wait is reached is the last value or error surfaced, wrapped in
RetryTimeoutError. The attempt that crosses the deadline is still allowed
to finish and be evaluated.

There is no default policy: every caller states its own wait and interval.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import datetime as _datetime
import logging as _logging
import time as _time
import typing as _typing

import tenacity as _tenacity

import questline.errors as errors

_logger = _logging.getLogger(__name__)

T = _typing.TypeVar("T")

Duration = _typing.Union[_datetime.timedelta, float, int]


def _seconds(value: Duration) -> float:
    if isinstance(value, _datetime.timedelta):
        return value.total_seconds()
    return float(value)


@_dataclasses.dataclass(frozen=True)
class RetryCondition(_typing.Generic[T]):
    """
    A value-producing function paired with its success predicate.

    Attributes:
        function: Called with the service being polled, produces a value.
        condition: Decides whether the produced value is acceptable.
    """

    function: _typing.Callable[[_typing.Any], T]
    condition: _typing.Callable[[T], bool]


def retry_until(
    max_wait: Duration,
    interval: Duration,
    produce: _typing.Callable[[], T],
    succeeds: _typing.Callable[[T], bool],
    *,
    sleep: _typing.Callable[[float], None] = _time.sleep,
) -> T:
    """
    Poll ``produce`` until ``succeeds`` accepts its value.

    Args:
        max_wait: Maximum time to keep polling.
        interval: Pause between attempts.
        produce: Zero-argument producer; may perform I/O and may raise.
        succeeds: Predicate over the produced value.
        sleep: Sleep function (replaceable for tests).

    Returns:
        The first produced value accepted by ``succeeds``.

    Raises:
        RetryTimeoutError: If the maximum wait elapsed first. When the final
            attempt raised, that error is chained as the cause.
        ValueError: If ``max_wait`` or ``interval`` is negative.
    """
    max_wait_s = _seconds(max_wait)
    interval_s = _seconds(interval)
    if max_wait_s < 0 or interval_s < 0:
        raise ValueError("max_wait and interval must not be negative")

    def _unmet(value: T) -> bool:
        return not succeeds(value)

    def _until_deadline(retry_state: _tenacity.RetryCallState) -> float:
        # the next attempt starts no later than the deadline
        remaining = max_wait_s - (retry_state.seconds_since_start or 0.0)
        return max(0.0, min(interval_s, remaining))

    def _log_attempt(retry_state: _tenacity.RetryCallState) -> None:
        outcome = retry_state.outcome
        pause = retry_state.next_action.sleep if retry_state.next_action else interval_s
        if outcome is not None and outcome.failed:
            _logger.debug(
                "Attempt %d raised %s, retrying in %.3fs",
                retry_state.attempt_number,
                outcome.exception(),
                pause,
            )
        else:
            _logger.debug(
                "Attempt %d did not meet the condition, retrying in %.3fs",
                retry_state.attempt_number,
                pause,
            )

    retrying = _tenacity.Retrying(
        stop=_tenacity.stop_after_delay(max_wait_s),
        wait=_until_deadline,
        retry=(
            _tenacity.retry_if_exception_type(Exception)
            | _tenacity.retry_if_result(_unmet)
        ),
        before_sleep=_log_attempt,
        sleep=sleep,
        reraise=False,
    )

    try:
        return retrying(produce)
    except _tenacity.RetryError as e:
        last = e.last_attempt
        if last.failed:
            cause = last.exception()
            raise errors.RetryTimeoutError(
                max_wait_s, last.attempt_number, last_error=cause
            ) from cause
        raise errors.RetryTimeoutError(
            max_wait_s, last.attempt_number, last_value=last.result()
        ) from None
