"""
Variant catalog.

A variant is one named implementation of a pluggable contract (a hook
flow, a data forge, a cleanup action, ...). Variants are registered
explicitly, usually by a module-level decorator, and recorded together with
the scope (dotted module path) they live in. Discovery later searches the
catalog by contract, name and scope.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import questline.errors as errors

_logger = _logging.getLogger(__name__)

F = _typing.TypeVar("F")


@_dataclasses.dataclass(frozen=True)
class VariantEntry:
    """
    One registered implementation of a contract.

    Attributes:
        contract: Contract token the variant implements (usually a Protocol class).
        name: Identifier the variant is requested by.
        scope: Dotted module path the implementation belongs to.
        implementation: The implementation itself.
    """

    contract: _typing.Any
    name: str
    scope: str
    implementation: _typing.Any = _dataclasses.field(compare=False)

    @property
    def identity(self) -> tuple[_typing.Any, str, str]:
        """The (contract, name, scope) triple that is unique in a catalog."""
        return (self.contract, self.name, self.scope)

    def in_scope(self, scope: str) -> bool:
        """Whether this entry lives in ``scope`` or one of its sub-modules."""
        return self.scope == scope or self.scope.startswith(scope + ".")

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict."""
        contract = self.contract
        return {
            "contract": f"{contract.__module__}.{contract.__qualname__}"
            if isinstance(contract, type)
            else repr(contract),
            "name": self.name,
            "scope": self.scope,
            "implementation": getattr(
                self.implementation, "__qualname__", type(self.implementation).__qualname__
            ),
        }


class Catalog:
    """
    Registry of variants keyed by (contract, name, scope).

    Within one scope a (contract, name) pair is unique. The same pair may
    appear in several scopes; resolving that ambiguity is the resolver's job.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[_typing.Any, str, str], VariantEntry] = {}
        self._revision = 0

    @property
    def revision(self) -> int:
        """Counter bumped on every change, used to invalidate resolver memos."""
        return self._revision

    def register(
        self,
        contract: _typing.Any,
        name: str,
        implementation: _typing.Any,
        *,
        scope: str | None = None,
    ) -> VariantEntry:
        """
        Register a variant.

        Args:
            contract: Contract token the implementation satisfies.
            name: Variant name.
            implementation: The implementation.
            scope: Scope to record; defaults to the implementation's module.

        Returns:
            The registered entry.

        Raises:
            DuplicateVariantError: If a different implementation is already
                registered under the same (contract, name, scope).
            ValueError: If no scope is given and none can be derived.
        """
        if scope is None:
            scope = getattr(implementation, "__module__", None)
            if not scope:
                raise ValueError(f"Cannot derive a scope for variant '{name}'; pass scope=")

        entry = VariantEntry(contract, name, scope, implementation)
        existing = self._entries.get(entry.identity)
        if existing is not None:
            if existing.implementation is implementation:
                return existing
            raise errors.DuplicateVariantError(
                f"Variant '{name}' of {getattr(contract, '__qualname__', contract)} "
                f"is already registered in scope '{scope}'"
            )

        self._entries[entry.identity] = entry
        self._revision += 1
        _logger.debug("Registered variant %s in %s", name, scope)
        return entry

    def variant(
        self,
        contract: _typing.Any,
        name: str,
        *,
        scope: str | None = None,
    ) -> _typing.Callable[[F], F]:
        """
        Decorator form of ``register``.

        Example:
            @catalog.variant(HookFlow, "SEED_USERS")
            def seed_users(service, outputs, arguments): ...
        """

        def _decorator(implementation: F) -> F:
            self.register(contract, name, implementation, scope=scope)
            return implementation

        return _decorator

    def unregister(self, contract: _typing.Any, name: str, scope: str) -> bool:
        """
        Remove a variant.

        Returns:
            True if an entry was removed.
        """
        removed = self._entries.pop((contract, name, scope), None)
        if removed is None:
            return False
        self._revision += 1
        return True

    def entries(self, contract: _typing.Any | None = None) -> list[VariantEntry]:
        """
        List entries in registration order.

        Args:
            contract: Only return entries of this contract.
        """
        if contract is None:
            return list(self._entries.values())
        return [e for e in self._entries.values() if e.contract is contract]

    def names(self, contract: _typing.Any) -> set[str]:
        """All variant names registered for ``contract`` in any scope."""
        return {e.name for e in self.entries(contract)}

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()
        self._revision += 1

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> _typing.Iterator[VariantEntry]:
        return iter(list(self._entries.values()))


# Process-wide catalog populated by module-level @variant decorators
_default_catalog = Catalog()


def default_catalog() -> Catalog:
    """Get the process-wide catalog used by the module-level decorators."""
    return _default_catalog


def variant(
    contract: _typing.Any,
    name: str,
    *,
    scope: str | None = None,
) -> _typing.Callable[[F], F]:
    """Register the decorated object as a variant in the default catalog."""
    return _default_catalog.variant(contract, name, scope=scope)
