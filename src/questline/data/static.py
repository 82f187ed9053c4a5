"""
Static test data.

A static data provider is a named zero-argument callable returning a mapping
of fixed values (credentials, base URLs, reference ids). Loading one puts the
mapping under StorageKeys.STATIC_DATA, where static_test_data() reads it.
"""

from __future__ import annotations

import typing as _typing

import questline.discovery.catalog as catalog_mod
import questline.discovery.resolver as resolver_mod
import questline.log as log
import questline.storage as storage_mod

F = _typing.TypeVar("F")


@_typing.runtime_checkable
class StaticDataProvider(_typing.Protocol):
    """Returns the static key-value data of a test."""

    def __call__(self) -> _typing.Mapping[str, _typing.Any]: ...


def static_data_provider(name: str, *, scope: str | None = None) -> _typing.Callable[[F], F]:
    """Register the decorated callable as a StaticDataProvider in the default catalog."""
    return catalog_mod.variant(StaticDataProvider, name, scope=scope)


def load_static_data(
    resolver: resolver_mod.Resolver,
    storage: storage_mod.Storage,
    name: str,
) -> dict[str, _typing.Any]:
    """
    Resolve provider ``name`` and store its data under STATIC_DATA.

    Returns:
        A copy of the provider's mapping, as stored.

    Raises:
        VariantNotFoundError, AmbiguousVariantError, InvalidVariantNameError:
            The provider could not be resolved.
        TypeError: The provider returned something other than a mapping.
    """
    provider = resolver.resolve(StaticDataProvider, name)
    log.LogQuest.extended("Loading static test data from: %s", name)
    values = provider()
    if not isinstance(values, _typing.Mapping):
        raise TypeError(
            f"Static data provider '{name}' returned {type(values).__name__}, expected a mapping"
        )
    static = dict(values)
    storage.put(storage_mod.StorageKeys.STATIC_DATA, static)
    return static
