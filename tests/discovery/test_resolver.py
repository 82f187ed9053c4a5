"""Tests for variant resolution and the first-scope fallback."""

import typing as _typing

import pytest as _pytest

import questline.discovery as discovery
import questline.errors as errors


class Flow(_typing.Protocol):
    def __call__(self) -> _typing.Any: ...


class Unrelated(_typing.Protocol):
    def __call__(self) -> _typing.Any: ...


def _variant(value: str) -> _typing.Callable[[], str]:
    def _impl() -> str:
        return value

    return _impl


MakeResolver = _typing.Callable[..., discovery.Resolver]


class TestUniqueMatch:
    """A single match anywhere wins."""

    def test_single_scope(self, catalog: discovery.Catalog, make_resolver: MakeResolver) -> None:
        """The only implementation is returned."""
        catalog.register(Flow, "ALPHA", _variant("a"), scope="first.pkg")
        assert make_resolver("first.pkg").resolve(Flow, "ALPHA")() == "a"

    def test_match_in_later_scope(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """A unique match in a non-first scope is still found."""
        catalog.register(Flow, "ALPHA", _variant("b"), scope="second.pkg")
        assert make_resolver("first.pkg", "second.pkg").resolve(Flow, "ALPHA")() == "b"

    def test_submodule_belongs_to_scope(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """Entries in sub-modules of a scope are found."""
        catalog.register(Flow, "ALPHA", _variant("a"), scope="first.pkg.hooks.users")
        entry = make_resolver("first.pkg").resolve_entry(Flow, "ALPHA")
        assert entry.scope == "first.pkg.hooks.users"


class TestFallback:
    """Several matches retry in the first scope only."""

    def test_first_scope_wins(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """One match in the first scope resolves the ambiguity."""
        catalog.register(Flow, "ALPHA", _variant("first"), scope="first.pkg")
        catalog.register(Flow, "ALPHA", _variant("second"), scope="second.pkg")
        assert make_resolver("first.pkg", "second.pkg").resolve(Flow, "ALPHA")() == "first"

    def test_order_of_scopes_decides(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """Swapping the scopes swaps the winner."""
        catalog.register(Flow, "ALPHA", _variant("first"), scope="first.pkg")
        catalog.register(Flow, "ALPHA", _variant("second"), scope="second.pkg")
        assert make_resolver("second.pkg", "first.pkg").resolve(Flow, "ALPHA")() == "second"

    def test_none_in_first_scope(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """Several matches, none in the first scope, is not found."""
        catalog.register(Flow, "ALPHA", _variant("b"), scope="second.pkg")
        catalog.register(Flow, "ALPHA", _variant("c"), scope="third.pkg")
        with _pytest.raises(errors.VariantNotFoundError) as exc_info:
            make_resolver("first.pkg", "second.pkg", "third.pkg").resolve(Flow, "ALPHA")
        assert exc_info.value.scopes == ("first.pkg",)

    def test_ambiguous_in_first_scope(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """Several matches inside the first scope is ambiguous."""
        catalog.register(Flow, "ALPHA", _variant("x"), scope="first.pkg.a")
        catalog.register(Flow, "ALPHA", _variant("y"), scope="first.pkg.b")
        with _pytest.raises(errors.AmbiguousVariantError) as exc_info:
            make_resolver("first.pkg").resolve(Flow, "ALPHA")
        assert exc_info.value.scope == "first.pkg"
        assert set(exc_info.value.candidates) == {"first.pkg.a", "first.pkg.b"}
        assert isinstance(exc_info.value, LookupError)


class TestMisses:
    """Not-found and invalid-name outcomes."""

    def test_not_found_outside_scopes(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """A known name outside the configured scopes is not found."""
        catalog.register(Flow, "ALPHA", _variant("a"), scope="elsewhere")
        with _pytest.raises(errors.VariantNotFoundError) as exc_info:
            make_resolver("first.pkg").resolve(Flow, "ALPHA")
        assert exc_info.value.name == "ALPHA"
        assert exc_info.value.contract is Flow

    def test_not_found_when_contract_unknown(self, make_resolver: MakeResolver) -> None:
        """A contract without variants yields not found."""
        with _pytest.raises(errors.VariantNotFoundError):
            make_resolver("first.pkg").resolve(Flow, "ALPHA")

    def test_unknown_name_is_invalid(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """A name no scope knows for the contract is invalid."""
        catalog.register(Flow, "ALPHA", _variant("a"), scope="first.pkg")
        with _pytest.raises(errors.InvalidVariantNameError) as exc_info:
            make_resolver("first.pkg").resolve(Flow, "OMEGA")
        assert isinstance(exc_info.value, ValueError)
        assert "ALPHA" in str(exc_info.value)

    def test_other_contract_does_not_match(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """Names are looked up per contract."""
        catalog.register(Unrelated, "ALPHA", _variant("a"), scope="first.pkg")
        with _pytest.raises(errors.VariantNotFoundError):
            make_resolver("first.pkg").resolve(Flow, "ALPHA")

    @_pytest.mark.parametrize("name", ["", " ALPHA", "AL PHA", 7])
    def test_malformed_names(self, name: _typing.Any, make_resolver: MakeResolver) -> None:
        """Empty, whitespace-bearing and non-string names are invalid."""
        with _pytest.raises(errors.InvalidVariantNameError):
            make_resolver("first.pkg").resolve(Flow, name)


class TestMemo:
    """Resolution results are cached until the catalog changes."""

    def test_repeated_resolution_is_stable(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """The same entry is returned every time."""
        catalog.register(Flow, "ALPHA", _variant("a"), scope="first.pkg")
        resolver = make_resolver("first.pkg")
        assert resolver.resolve_entry(Flow, "ALPHA") is resolver.resolve_entry(Flow, "ALPHA")

    def test_catalog_change_invalidates(
        self, catalog: discovery.Catalog, make_resolver: MakeResolver
    ) -> None:
        """A later registration is seen by an existing resolver."""
        catalog.register(Flow, "ALPHA", _variant("second"), scope="second.pkg")
        resolver = make_resolver("first.pkg", "second.pkg")
        assert resolver.resolve(Flow, "ALPHA")() == "second"

        catalog.register(Flow, "ALPHA", _variant("first"), scope="first.pkg")
        assert resolver.resolve(Flow, "ALPHA")() == "first"

    def test_with_scopes(self, catalog: discovery.Catalog, make_resolver: MakeResolver) -> None:
        """with_scopes shares the catalog."""
        catalog.register(Flow, "ALPHA", _variant("b"), scope="second.pkg")
        narrowed = make_resolver("first.pkg").with_scopes(["second.pkg"])
        assert narrowed.catalog is catalog
        assert narrowed.scopes == ("second.pkg",)
        assert narrowed.resolve(Flow, "ALPHA")() == "b"

    def test_default_catalog(self) -> None:
        """A resolver without a catalog searches the process-wide one."""
        assert discovery.Resolver().catalog is discovery.default_catalog()
