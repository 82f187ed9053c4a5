"""
Validation results and soft assertion collection.

Domain adapters turn their checks into AssertionResult objects. A hard
result fails immediately; soft results are collected on the quest and
asserted together when the quest completes.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing


@_dataclasses.dataclass(frozen=True)
class AssertionResult:
    """
    Outcome of one validation.

    Attributes:
        passed: Whether the check passed.
        description: What was checked.
        expected: Expected value.
        actual: Observed value.
        soft: Collect instead of failing immediately.
    """

    passed: bool
    description: str
    expected: _typing.Any = None
    actual: _typing.Any = None
    soft: bool = False

    def __str__(self) -> str:
        verdict = "✔ Validation passed" if self.passed else "✘ Validation failed"
        return f"{verdict}: {self.description} (Expected: {self.expected}, Actual: {self.actual})"

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict."""
        return {
            "passed": self.passed,
            "description": self.description,
            "expected": repr(self.expected),
            "actual": repr(self.actual),
            "soft": self.soft,
        }


class SoftAssertionError(AssertionError):
    """Raised by SoftAssertions.assert_all() when collected checks failed."""

    def __init__(self, failures: _typing.Sequence[str]) -> None:
        self.failures = list(failures)
        lines = "\n".join(f"  {i}) {msg}" for i, msg in enumerate(self.failures, start=1))
        super().__init__(f"{len(self.failures)} soft assertion(s) failed:\n{lines}")


class SoftAssertions:
    """Collects failed checks and reports them together."""

    def __init__(self) -> None:
        self._failures: list[str] = []
        self._checked = 0

    def check(self, passed: bool, message: str) -> bool:
        """
        Record a check.

        Returns:
            ``passed``, so callers can branch on it.
        """
        self._checked += 1
        if not passed:
            self._failures.append(message)
        return passed

    def equal(self, actual: _typing.Any, expected: _typing.Any, description: str = "") -> bool:
        """Record an equality check."""
        message = description or "values differ"
        return self.check(
            actual == expected,
            f"{message} (Expected: {expected!r}, Actual: {actual!r})",
        )

    def record(self, result: AssertionResult) -> bool:
        """Record an AssertionResult."""
        return self.check(result.passed, str(result))

    @property
    def failures(self) -> list[str]:
        """Messages of the failed checks so far."""
        return list(self._failures)

    @property
    def checked(self) -> int:
        """Number of checks recorded."""
        return self._checked

    def assert_all(self) -> None:
        """
        Fail if any collected check failed.

        Raises:
            SoftAssertionError: Listing every failure.
        """
        if self._failures:
            raise SoftAssertionError(self._failures)
