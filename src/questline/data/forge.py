"""
Test data creation.

A data forge is a named zero-argument factory registered in the catalog.
The Materializer resolves forges by name, evaluates them now or hands out
a Late, and records what it produced in the quest storage so later steps
can read it back.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import questline.data.late as late_mod
import questline.discovery.catalog as catalog_mod
import questline.discovery.resolver as resolver_mod
import questline.log as log
import questline.storage as storage_mod

_logger = _logging.getLogger(__name__)

F = _typing.TypeVar("F")


@_typing.runtime_checkable
class DataForge(_typing.Protocol):
    """Zero-argument factory of one kind of test data."""

    def __call__(self) -> _typing.Any: ...


def data_forge(name: str, *, scope: str | None = None) -> _typing.Callable[[F], F]:
    """Register the decorated factory as a DataForge in the default catalog."""
    return catalog_mod.variant(DataForge, name, scope=scope)


class Materializer:
    """Creates test data from named forges and records it in storage."""

    def __init__(
        self,
        resolver: resolver_mod.Resolver,
        storage: storage_mod.Storage,
        *,
        contract: _typing.Any = DataForge,
    ) -> None:
        self._resolver = resolver
        self._storage = storage
        self._contract = contract

    @property
    def storage(self) -> storage_mod.Storage:
        return self._storage

    def materialize(
        self,
        name: str,
        late: bool = False,
        namespace: _typing.Hashable = storage_mod.StorageKeys.ARGUMENTS,
    ) -> _typing.Any:
        """
        Create the data produced by forge ``name``.

        Args:
            name: Forge variant name.
            late: Return a Late instead of evaluating the forge now. A forge
                registered as a Late is returned as is, keeping its policy.
            namespace: Storage namespace the result is recorded in.

        Returns:
            The created value, or a Late when ``late`` is set.

        Raises:
            VariantNotFoundError, AmbiguousVariantError, InvalidVariantNameError:
                The forge could not be resolved.
        """
        forge = self._resolver.resolve(self._contract, name)

        value: _typing.Any
        if late:
            log.LogQuest.extended("Creating data using late binding for: %s", name)
            value = forge if isinstance(forge, late_mod.Late) else late_mod.Late(forge)
        else:
            log.LogQuest.extended("Creating data for: %s", name)
            value = forge()

        self._storage.sub(namespace).put(name, value)
        return value
