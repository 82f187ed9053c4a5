"""
Rings: capability facades a quest can switch between.

A ring is a domain-specific fluent interface (API calls, queries, UI
actions) bound to one quest. Every ring can drop back to the quest it
belongs to and shares the quest's storage and soft assertions.
"""

from __future__ import annotations

import inspect as _inspect
import typing as _typing

import questline.errors as errors
import questline.events as events_mod
import questline.log as log
import questline.retry as retry
import questline.validation as validation

if _typing.TYPE_CHECKING:
    import questline.quest.quest as quest_mod
    import questline.quest.super_quest as super_quest

Self = _typing.TypeVar("Self", bound="Ring")


def _wants_collector(assertion: _typing.Callable[..., _typing.Any]) -> bool:
    try:
        signature = _inspect.signature(assertion)
    except (TypeError, ValueError):
        return False
    return any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in signature.parameters.values()
    )


class Ring:
    """
    Base class for capability facades.

    Subclasses add domain operations and may override
    ``post_quest_setup`` to initialize state once bound.
    """

    ring_name: _typing.ClassVar[str | None] = None
    """Display name used in logs; defaults to the class path."""

    def __init__(self) -> None:
        self._quest: super_quest.SuperQuest | None = None

    @property
    def quest(self) -> super_quest.SuperQuest:
        """
        The quest this ring is bound to.

        Raises:
            CompositionError: If the ring was never bound.
        """
        if self._quest is None:
            raise errors.CompositionError(f"{type(self).__qualname__} is not bound to a quest")
        return self._quest

    @property
    def is_bound(self) -> bool:
        """Whether the ring is bound to a quest."""
        return self._quest is not None

    def bind(self, quest: super_quest.SuperQuest) -> None:
        """Bind the ring to ``quest`` and run ``post_quest_setup``."""
        self._quest = quest
        self.post_quest_setup()

    def post_quest_setup(self) -> None:
        """Hook for subclasses, called after binding."""
        pass

    def drop(self) -> quest_mod.Quest:
        """Leave the ring and return to the quest."""
        log.LogQuest.info("The quest has dropped the ring.")
        return self.quest.original

    def validate(
        self: Self,
        assertion: _typing.Callable[..., _typing.Any],
        *,
        soft: bool | None = None,
    ) -> Self:
        """
        Run a validation block.

        A block taking one argument receives the quest's SoftAssertions
        (soft validation, asserted on completion). A block taking none runs
        as a hard validation and any failure propagates immediately.

        Args:
            assertion: The validation block.
            soft: Force soft/hard mode instead of inferring it.
        """
        if soft is None:
            soft = _wants_collector(assertion)

        if soft:
            log.LogQuest.validation("Starting soft validation.")
            assertion(self.quest.soft_assertions)
            return self

        log.LogQuest.validation("Starting hard validation...")
        try:
            assertion()
        except Exception as e:
            log.LogQuest.validation("Hard validation failed: %s", e)
            raise
        log.LogQuest.validation("Hard validation completed successfully.")
        return self

    def validation(self, results: _typing.Iterable[validation.AssertionResult]) -> None:
        """
        Report AssertionResults.

        Soft results are collected on the quest; a failed hard result raises
        AssertionError straight away.
        """
        for result in results:
            message = str(result)
            log.LogQuest.validation(message)
            self.quest.events.emit(
                events_mod.EventKind.VALIDATION,
                result.description,
                result=result,
            )
            if result.soft:
                self.quest.soft_assertions.record(result)
            elif not result.passed:
                raise AssertionError(message)

    def retry_until(
        self: Self,
        condition: retry.RetryCondition[_typing.Any],
        max_wait: retry.Duration,
        interval: retry.Duration,
        service: _typing.Any = None,
    ) -> Self:
        """
        Poll ``condition`` against ``service`` (this ring by default).

        Raises:
            RetryTimeoutError: If the condition is not met within ``max_wait``.
        """
        target = self if service is None else service
        retry.retry_until(
            max_wait,
            interval,
            lambda: condition.function(target),
            condition.condition,
        )
        return self

    def complete(self) -> None:
        """Drop back to the quest and complete it."""
        self.drop().complete()
