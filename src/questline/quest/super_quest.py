"""
SuperQuest: the active execution context handed to rings and flows.

It wraps an original Quest and delegates every operation to it, exposing
the internal operations (ring registration, artifact access) that test
bodies should not call directly. Storage, rings and soft assertions are
those of the original, not copies.
"""

from __future__ import annotations

import typing as _typing

import questline.errors as errors
import questline.events as events_mod
import questline.quest.quest as quest_mod
import questline.storage as storage_mod
import questline.validation as validation

if _typing.TYPE_CHECKING:
    import questline.quest.ring as ring_mod

R = _typing.TypeVar("R", bound="ring_mod.Ring")
A = _typing.TypeVar("A")


class SuperQuest:
    """Delegating wrapper around an original Quest."""

    def __init__(self, quest: quest_mod.Quest) -> None:
        if quest is None:
            raise errors.CompositionError("Cannot wrap an absent quest")
        if isinstance(quest, SuperQuest):
            quest = quest.original
        if not isinstance(quest, quest_mod.Quest):
            raise errors.CompositionError(
                f"Cannot wrap {type(quest).__name__}: expected a Quest"
            )
        self._original = quest

    @property
    def original(self) -> quest_mod.Quest:
        """The wrapped Quest."""
        return self._original

    @property
    def storage(self) -> storage_mod.Storage:
        return self._original.storage

    @property
    def soft_assertions(self) -> validation.SoftAssertions:
        return self._original.soft_assertions

    @property
    def events(self) -> events_mod.EventBus:
        return self._original.events

    def use(self, ring_type: type[R]) -> R:
        return self._original.use(ring_type)

    def complete(self) -> None:
        self._original.complete()

    def has_ring(self, ring_type: type) -> bool:
        return self._original.has_ring(ring_type)

    def cast(self, ring_type: type[R]) -> R:
        """Get a registered ring without logging a switch."""
        return self._original._cast(ring_type)

    def artifact(self, ring_type: type, artifact_type: type[A]) -> A:
        """Get the first attribute of a registered ring that is an ``artifact_type``."""
        return self._original._artifact(ring_type, artifact_type)

    def register_ring(self, ring_type: type, ring: ring_mod.Ring) -> None:
        """Register ``ring`` under ``ring_type``."""
        self._original._register_ring(ring_type, ring)

    def remove_ring(self, ring_type: type) -> None:
        """Remove the ring registered under ``ring_type``."""
        self._original._remove_ring(ring_type)

    def ring_types(self) -> list[type]:
        """Types of all registered rings, in registration order."""
        return self._original._ring_types()

    def __repr__(self) -> str:
        return f"SuperQuest({self._original!r})"
