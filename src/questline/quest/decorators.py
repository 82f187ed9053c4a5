"""
Runtime composition of capability facades onto a quest.

decorate() returns an object that behaves like the base quest and also
offers the operations of each requested capability. Nothing is copied:
attribute lookups fall through to the base first and then to each
capability implementation in the requested order, so storage mutations
made through either object are seen by both.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import questline.errors as errors
import questline.quest.quest as quest_mod
import questline.quest.ring as ring_mod
import questline.quest.super_quest as super_quest
import questline.storage as storage_mod

_logger = _logging.getLogger(__name__)

C = _typing.TypeVar("C")

CapabilityFactory = _typing.Callable[[super_quest.SuperQuest], _typing.Any]


class ComposedQuest:
    """A quest augmented with capability implementations."""

    def __init__(
        self,
        base: quest_mod.Quest | super_quest.SuperQuest,
        implementations: dict[type, _typing.Any],
    ) -> None:
        self.__dict__["_base"] = base
        self.__dict__["_implementations"] = dict(implementations)

    @property
    def base(self) -> quest_mod.Quest | super_quest.SuperQuest:
        """The decorated quest."""
        return self.__dict__["_base"]

    @property
    def storage(self) -> storage_mod.Storage:
        """Storage of the decorated quest (same object)."""
        return self.base.storage

    @property
    def capabilities(self) -> list[type]:
        """Capabilities added, in lookup order."""
        return list(self.__dict__["_implementations"])

    def provides(self, capability: type) -> bool:
        """Whether ``capability`` (or a subclass of it) was composed in."""
        return any(issubclass(c, capability) for c in self.__dict__["_implementations"])

    def capability(self, capability: type[C]) -> C:
        """
        Get the implementation composed in for ``capability``.

        Raises:
            LookupError: If the capability was not composed in.
        """
        for registered, impl in self.__dict__["_implementations"].items():
            if issubclass(registered, capability):
                return _typing.cast(C, impl)
        raise LookupError(f"Capability not composed: {capability.__qualname__}")

    def __getattr__(self, name: str) -> _typing.Any:
        # unset while copy.copy rebuilds the instance
        if "_base" not in self.__dict__:
            raise AttributeError(name)
        base = self.__dict__["_base"]
        try:
            return getattr(base, name)
        except AttributeError:
            pass
        for impl in self.__dict__.get("_implementations", {}).values():
            try:
                return getattr(impl, name)
            except AttributeError:
                continue
        raise AttributeError(
            f"{type(base).__name__} composed with "
            f"{[c.__name__ for c in self.capabilities]} has no attribute {name!r}"
        )

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        setattr(self.__dict__["_base"], name, value)

    def __repr__(self) -> str:
        names = ", ".join(c.__name__ for c in self.capabilities)
        return f"ComposedQuest({self.base!r}, [{names}])"


class DecoratorsFactory:
    """
    Builds ComposedQuest objects.

    Capability implementations come from a registered factory or, when none
    is registered, from instantiating the capability class with no
    arguments. Ring implementations are bound to the quest and registered
    on it, so ``use()`` finds them too.
    """

    def __init__(self) -> None:
        self._factories: dict[type, CapabilityFactory] = {}

    def register(self, capability: type, factory: CapabilityFactory) -> None:
        """Use ``factory`` to build implementations of ``capability``."""
        self._factories[capability] = factory

    def decorate(
        self,
        base: quest_mod.Quest | super_quest.SuperQuest | ComposedQuest | None,
        *capabilities: type,
    ) -> ComposedQuest:
        """
        Compose ``capabilities`` onto ``base``.

        Args:
            base: The quest to decorate. A ComposedQuest is extended.
            capabilities: Capability classes to add.

        Returns:
            The composed quest.

        Raises:
            CompositionError: If ``base`` is absent or not a quest, or a
                capability cannot be built.
        """
        if base is None:
            raise errors.CompositionError("Cannot decorate an absent quest")

        implementations: dict[type, _typing.Any] = {}
        if isinstance(base, ComposedQuest):
            for capability in base.capabilities:
                implementations[capability] = base.capability(capability)
            base = base.base

        if not isinstance(base, (quest_mod.Quest, super_quest.SuperQuest)):
            raise errors.CompositionError(
                f"Cannot decorate {type(base).__name__}: expected a Quest"
            )

        elevated = super_quest.SuperQuest(base)
        for capability in capabilities:
            if not isinstance(capability, type):
                raise errors.CompositionError(f"Capability must be a class, got {capability!r}")
            if capability in implementations:
                continue
            implementations[capability] = self._build(capability, elevated)

        _logger.debug(
            "Decorated quest with %s",
            ", ".join(c.__qualname__ for c in implementations) or "nothing",
        )
        return ComposedQuest(base, implementations)

    def _build(self, capability: type, quest: super_quest.SuperQuest) -> _typing.Any:
        factory = self._factories.get(capability)
        try:
            impl = factory(quest) if factory is not None else capability()
        except Exception as e:
            raise errors.CompositionError(
                f"Cannot build capability {capability.__qualname__}: {e}"
            ) from e

        if isinstance(impl, ring_mod.Ring):
            if not impl.is_bound:
                impl.bind(quest)
            quest.register_ring(capability, impl)
        return impl


_default_factory = DecoratorsFactory()


def decorate(
    base: quest_mod.Quest | super_quest.SuperQuest | ComposedQuest | None,
    *capabilities: type,
) -> ComposedQuest:
    """Compose ``capabilities`` onto ``base`` using the default factory."""
    return _default_factory.decorate(base, *capabilities)


def default_factory() -> DecoratorsFactory:
    """Get the factory used by the module-level ``decorate``."""
    return _default_factory
