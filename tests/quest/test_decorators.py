"""Tests for capability composition."""

import copy as _copy

import pytest as _pytest

import questline.errors as errors
import questline.quest as quest


class Auditing:
    """Capability without a ring base."""

    def __init__(self) -> None:
        self.entries: list[str] = []

    def audit(self, message: str) -> str:
        self.entries.append(message)
        return message


class ApiRing(quest.Ring):
    def __init__(self) -> None:
        super().__init__()
        self.setup_ran = False

    def post_quest_setup(self) -> None:
        self.setup_ran = True

    def remember(self, key: str, value: object) -> "ApiRing":
        self.quest.storage.put(key, value)
        return self

    def audit(self, message: str) -> str:
        return f"api:{message}"


class NeedsArguments:
    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint


@_pytest.fixture
def factory() -> quest.DecoratorsFactory:
    return quest.DecoratorsFactory()


class TestDecorate:
    """Tests for DecoratorsFactory.decorate."""

    def test_exposes_base_and_capabilities(self, factory: quest.DecoratorsFactory) -> None:
        """The composed object offers base and capability operations."""
        base = quest.Quest()
        composed = factory.decorate(base, Auditing)
        assert composed.storage is base.storage
        assert composed.audit("hello") == "hello"
        assert composed.provides(Auditing)
        assert composed.capability(Auditing).entries == ["hello"]

    def test_lookup_follows_requested_order(self, factory: quest.DecoratorsFactory) -> None:
        """The first capability offering a name wins."""
        assert factory.decorate(quest.Quest(), ApiRing, Auditing).audit("x") == "api:x"
        assert factory.decorate(quest.Quest(), Auditing, ApiRing).audit("x") == "x"

    def test_storage_shared_both_ways(self, factory: quest.DecoratorsFactory) -> None:
        """Writes through either object are seen by the other."""
        base = quest.Quest()
        composed = factory.decorate(base, ApiRing)

        composed.remember("from_capability", 1)
        base.storage.put("from_base", 2)

        assert base.storage.get("from_capability", int) == 1
        assert composed.storage.get("from_base", int) == 2

    def test_ring_capabilities_are_bound_and_registered(
        self, factory: quest.DecoratorsFactory
    ) -> None:
        """Rings are bound to the base and reachable with use()."""
        base = quest.Quest()
        composed = factory.decorate(base, ApiRing)
        ring = composed.capability(ApiRing)
        assert ring.setup_ran
        assert ring.quest.original is base
        assert base.use(ApiRing) is ring

    def test_registered_factory(self, factory: quest.DecoratorsFactory) -> None:
        """A registered factory builds the capability from the quest."""
        seen: list[quest.SuperQuest] = []

        def _build(elevated: quest.SuperQuest) -> NeedsArguments:
            seen.append(elevated)
            return NeedsArguments("https://example.test")

        factory.register(NeedsArguments, _build)
        base = quest.Quest()
        composed = factory.decorate(base, NeedsArguments)
        assert composed.endpoint == "https://example.test"
        assert seen[0].original is base

    def test_extending_a_composed_quest(self, factory: quest.DecoratorsFactory) -> None:
        """Decorating a ComposedQuest keeps earlier capabilities."""
        base = quest.Quest()
        first = factory.decorate(base, Auditing)
        second = factory.decorate(first, ApiRing)
        assert second.base is base
        assert second.capabilities == [Auditing, ApiRing]
        assert second.capability(Auditing) is first.capability(Auditing)

    def test_decorating_a_super_quest(self, factory: quest.DecoratorsFactory) -> None:
        """A SuperQuest base is accepted."""
        elevated = quest.SuperQuest(quest.Quest())
        composed = factory.decorate(elevated, ApiRing)
        assert composed.storage is elevated.storage

    def test_unknown_attribute(self, factory: quest.DecoratorsFactory) -> None:
        """Names nobody offers raise AttributeError."""
        composed = factory.decorate(quest.Quest(), Auditing)
        with _pytest.raises(AttributeError, match="nothing_here"):
            composed.nothing_here  # noqa: B018

    def test_uninitialised_instance_raises_attribute_error(self) -> None:
        """Lookups on an instance built without __init__ raise AttributeError."""
        blank = quest.ComposedQuest.__new__(quest.ComposedQuest)
        with _pytest.raises(AttributeError):
            blank.storage  # noqa: B018
        assert not hasattr(blank, "__setstate__")

    def test_shallow_copy(self, factory: quest.DecoratorsFactory) -> None:
        """copy.copy yields a composition over the same base and implementations."""
        composed = factory.decorate(quest.Quest(), Auditing)
        clone = _copy.copy(composed)
        assert clone.base is composed.base
        assert clone.capability(Auditing) is composed.capability(Auditing)
        assert clone.audit("copied") == "copied"

    def test_capability_not_composed(self, factory: quest.DecoratorsFactory) -> None:
        """capability() on a missing capability raises LookupError."""
        composed = factory.decorate(quest.Quest())
        assert not composed.provides(Auditing)
        with _pytest.raises(LookupError):
            composed.capability(Auditing)

    def test_module_level_decorate(self) -> None:
        """decorate() uses the default factory."""
        composed = quest.decorate(quest.Quest(), Auditing)
        assert composed.provides(Auditing)
        assert isinstance(quest.default_factory(), quest.DecoratorsFactory)


class TestCompositionErrors:
    """Composition failures are fatal."""

    def test_absent_base(self, factory: quest.DecoratorsFactory) -> None:
        """Decorating None raises CompositionError."""
        with _pytest.raises(errors.CompositionError):
            factory.decorate(None, Auditing)

    def test_non_quest_base(self, factory: quest.DecoratorsFactory) -> None:
        """Decorating something that is not a quest raises CompositionError."""
        with _pytest.raises(errors.CompositionError, match="expected a Quest"):
            factory.decorate(object(), Auditing)  # type: ignore[arg-type]

    def test_capability_cannot_be_built(self, factory: quest.DecoratorsFactory) -> None:
        """A capability that needs arguments and has no factory fails."""
        with _pytest.raises(errors.CompositionError, match="NeedsArguments"):
            factory.decorate(quest.Quest(), NeedsArguments)

    def test_capability_must_be_a_class(self, factory: quest.DecoratorsFactory) -> None:
        """Capabilities are classes."""
        with _pytest.raises(errors.CompositionError):
            factory.decorate(quest.Quest(), "Auditing")  # type: ignore[arg-type]
