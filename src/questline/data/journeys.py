"""
Pre-test journeys.

A journey is a precondition flow (create a user, open a session, ...) that
runs before the test body. Its arguments are test data produced by forges;
they are recorded under StorageKeys.PRE_ARGUMENTS so the test can read them.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import questline.data.forge as forge
import questline.discovery.catalog as catalog_mod
import questline.discovery.resolver as resolver_mod
import questline.events as events_mod
import questline.log as log
import questline.storage as storage_mod

if _typing.TYPE_CHECKING:
    import questline.quest.super_quest as super_quest

_logger = _logging.getLogger(__name__)

F = _typing.TypeVar("F")


@_typing.runtime_checkable
class PreQuestJourney(_typing.Protocol):
    """Precondition flow run with the quest and its materialized data."""

    def __call__(self, quest: _typing.Any, arguments: list[_typing.Any]) -> None: ...


def journey(name: str, *, scope: str | None = None) -> _typing.Callable[[F], F]:
    """Register the decorated callable as a PreQuestJourney in the default catalog."""
    return catalog_mod.variant(PreQuestJourney, name, scope=scope)


@_dataclasses.dataclass(frozen=True)
class JourneyData:
    """
    One argument of a journey.

    Attributes:
        name: DataForge variant producing the value.
        late: Pass a Late instead of the evaluated value.
    """

    name: str
    late: bool = False


@_dataclasses.dataclass(frozen=True)
class JourneyDeclaration:
    """
    A journey to run before the test body.

    Attributes:
        name: PreQuestJourney variant name.
        order: Lower runs first; equal orders keep declaration order.
        data: Arguments, materialized in order.
    """

    name: str
    order: int = 0
    data: tuple[JourneyData, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "data",
            tuple(d if isinstance(d, JourneyData) else JourneyData(d) for d in self.data),
        )


class JourneyRunner:
    """Runs declared journeys against a quest."""

    def __init__(
        self,
        resolver: resolver_mod.Resolver,
        materializer: forge.Materializer,
        *,
        contract: _typing.Any = PreQuestJourney,
    ) -> None:
        self._resolver = resolver
        self._materializer = materializer
        self._contract = contract

    def run(
        self,
        quest: super_quest.SuperQuest,
        journeys: _typing.Iterable[JourneyDeclaration],
    ) -> None:
        """
        Run ``journeys`` in order.

        Raises:
            VariantNotFoundError, AmbiguousVariantError, InvalidVariantNameError:
                A journey or one of its forges could not be resolved.
            Exception: Whatever a journey raises, unchanged.
        """
        ordered = sorted(journeys, key=lambda j: j.order)
        if not ordered:
            return
        log.LogQuest.info("Processing %d pre-quest journey(s)", len(ordered))
        for declaration in ordered:
            self._run_one(quest, declaration)

    def _run_one(self, quest: super_quest.SuperQuest, declaration: JourneyDeclaration) -> None:
        flow = self._resolver.resolve(self._contract, declaration.name)
        arguments = [
            self._materializer.materialize(
                d.name, late=d.late, namespace=storage_mod.StorageKeys.PRE_ARGUMENTS
            )
            for d in declaration.data
        ]

        quest.events.emit(
            events_mod.EventKind.JOURNEY_STARTED,
            declaration.name,
            data=[d.name for d in declaration.data],
        )
        _logger.debug("Running journey %s with %d argument(s)", declaration.name, len(arguments))
        flow(quest, arguments)
        quest.events.emit(events_mod.EventKind.JOURNEY_FINISHED, declaration.name)
