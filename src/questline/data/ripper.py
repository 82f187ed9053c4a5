"""
Cleanup of test data.

Cleanup actions are DataRipper variants. A CleanupRegistry resolves them
when they are scheduled, so a misspelt name fails before the test runs,
and executes them once after the test body whatever its outcome. Failing
cleanups are reported but never raised.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

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
class DataRipper(_typing.Protocol):
    """Removes data a test created."""

    def __call__(self, quest: _typing.Any) -> None: ...


def data_ripper(name: str, *, scope: str | None = None) -> _typing.Callable[[F], F]:
    """Register the decorated callable as a DataRipper in the default catalog."""
    return catalog_mod.variant(DataRipper, name, scope=scope)


@_dataclasses.dataclass(frozen=True)
class CleanupFailure:
    """A cleanup action that raised."""

    name: str
    error: BaseException

    def to_dict(self) -> dict[str, str]:
        """Convert to JSON-serializable dict."""
        return {"name": self.name, "error": f"{type(self.error).__name__}: {self.error}"}


class CleanupRegistry:
    """Cleanup actions scheduled for one quest."""

    def __init__(
        self,
        resolver: resolver_mod.Resolver,
        quest: super_quest.SuperQuest,
        *,
        contract: _typing.Any = DataRipper,
    ) -> None:
        self._resolver = resolver
        self._quest = quest
        self._contract = contract
        self._scheduled: list[tuple[str, _typing.Callable[[_typing.Any], None]]] = []

    @property
    def scheduled(self) -> list[str]:
        """Names of actions waiting to run, in registration order."""
        return [name for name, _ in self._scheduled]

    def register(self, name: str) -> None:
        """
        Schedule cleanup action ``name``.

        Raises:
            VariantNotFoundError, AmbiguousVariantError, InvalidVariantNameError:
                The action could not be resolved.
        """
        action = self._resolver.resolve(self._contract, name)
        self._scheduled.append((name, action))

        storage = self._quest.storage
        names = storage.get(storage_mod.StorageKeys.CLEANUPS, list)
        storage.put(storage_mod.StorageKeys.CLEANUPS, [*names, name])

    def run(self) -> list[CleanupFailure]:
        """
        Execute every scheduled action once, in registration order.

        Returns:
            One CleanupFailure per action that raised.
        """
        scheduled, self._scheduled = self._scheduled, []
        failures: list[CleanupFailure] = []
        events = self._quest.events

        for name, action in scheduled:
            log.LogQuest.extended("Running cleanup: %s", name)
            try:
                action(self._quest)
            except Exception as e:
                log.LogQuest.error("Cleanup %s failed: %s", name, e)
                _logger.debug("Cleanup %s failed", name, exc_info=True)
                events.emit(events_mod.EventKind.CLEANUP_FAILED, name, error=e)
                failures.append(CleanupFailure(name, e))
                continue
            events.emit(events_mod.EventKind.CLEANUP_FINISHED, name)

        return failures
