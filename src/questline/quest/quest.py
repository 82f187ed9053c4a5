"""
The quest: execution context of a single test.

A quest owns one Storage, the ring facades registered for the test, one
soft-assertion collector and the event bus validations are reported on.
Rings are switched to with ``use()``; internal operations (registering
rings, reading artifacts) are reached through SuperQuest.
"""

from __future__ import annotations

import typing as _typing

import questline.constants as constants
import questline.errors as errors
import questline.events as events_mod
import questline.log as log
import questline.quest.holder as holder
import questline.storage as storage_mod
import questline.validation as validation

if _typing.TYPE_CHECKING:
    import questline.quest.ring as ring_mod

R = _typing.TypeVar("R", bound="ring_mod.Ring")
A = _typing.TypeVar("A")


class Quest:
    """Execution context shared by everything that runs inside one test."""

    def __init__(
        self,
        *,
        storage: storage_mod.Storage | None = None,
        events: events_mod.EventBus | None = None,
        default_namespace: str = constants.DEFAULT_NAMESPACE,
    ) -> None:
        """
        Initialize the quest.

        Args:
            storage: Storage to use; a fresh one is created by default.
            events: Event bus for validation reporting.
            default_namespace: Default namespace of a freshly created storage.
        """
        self._rings: dict[type, ring_mod.Ring] = {}
        self._storage = (
            storage if storage is not None
            else storage_mod.Storage(default_namespace=default_namespace)
        )
        self._soft_assertions = validation.SoftAssertions()
        self._events = events if events is not None else events_mod.EventBus()

    @property
    def storage(self) -> storage_mod.Storage:
        """The quest storage."""
        return self._storage

    @property
    def soft_assertions(self) -> validation.SoftAssertions:
        """Collector for soft validations."""
        return self._soft_assertions

    @property
    def events(self) -> events_mod.EventBus:
        """Event bus validations are reported on."""
        return self._events

    def use(self, ring_type: type[R]) -> R:
        """
        Switch to a registered ring.

        Args:
            ring_type: Ring class, or a base class of a registered ring.

        Returns:
            The registered ring instance.

        Raises:
            RingNotInitializedError: If no matching ring is registered.
        """
        ring = self._cast(ring_type)
        name = getattr(ring_type, "ring_name", None) or f"{ring_type.__module__}.{ring_type.__qualname__}"
        log.LogQuest.info(constants.RING_USED_TEMPLATE.format(name))
        return ring

    def complete(self) -> None:
        """
        Finish the quest.

        Clears the current-quest holder and asserts every collected soft
        validation.

        Raises:
            SoftAssertionError: If soft validations failed.
        """
        log.LogQuest.info("The quest has reached his end")
        holder.clear()
        self._soft_assertions.assert_all()

    def has_ring(self, ring_type: type) -> bool:
        """Whether a ring of ``ring_type`` (or a subclass) is registered."""
        return any(issubclass(registered, ring_type) for registered in self._rings)

    def _cast(self, ring_type: type[R]) -> R:
        for registered, ring in self._rings.items():
            if issubclass(registered, ring_type):
                return _typing.cast(R, ring)
        raise errors.RingNotInitializedError(ring_type)

    def _artifact(self, ring_type: type, artifact_type: type[A]) -> A:
        if ring_type is None or artifact_type is None:
            raise ValueError("Parameters ring_type and artifact_type must not be None.")
        ring = self._cast(ring_type)
        values = [v for v in vars(ring).values() if isinstance(v, artifact_type)]
        if not values:
            raise LookupError(
                f"Ring {ring_type.__qualname__} holds no artifact of type {artifact_type.__qualname__}"
            )
        if len(values) > 1:
            log.LogQuest.warning(
                "There is more than one artifact from type: %s inside class: %s. "
                "The first one will be taken: %s",
                artifact_type.__qualname__,
                ring_type.__qualname__,
                values[0],
            )
        return values[0]

    def _register_ring(self, ring_type: type, ring: ring_mod.Ring) -> None:
        self._rings[ring_type] = ring

    def _remove_ring(self, ring_type: type) -> None:
        self._rings.pop(ring_type, None)

    def _ring_types(self) -> list[type]:
        return list(self._rings)
