"""
Variant resolution across an ordered list of scopes.

Resolution order:
1. Search every configured scope at once.
2. One match wins.
3. No match fails with VariantNotFoundError.
4. Several matches: search again in the first configured scope only. One
   match there wins; none fails with VariantNotFoundError; several fail
   with AmbiguousVariantError.

A name that no scope of the catalog knows for the contract (or that is not
a usable identifier at all) fails with InvalidVariantNameError instead of
VariantNotFoundError.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import questline.discovery.catalog as catalog_mod
import questline.errors as errors

_logger = _logging.getLogger(__name__)


def _check_name(contract: _typing.Any, name: object) -> str:
    if not isinstance(name, str):
        raise errors.InvalidVariantNameError(contract, repr(name), "name must be a string")
    if not name or name.strip() != name or any(c.isspace() for c in name):
        raise errors.InvalidVariantNameError(
            contract, name, "name must be non-empty and contain no whitespace"
        )
    return name


def find(
    entries: _typing.Iterable[catalog_mod.VariantEntry],
    contract: _typing.Any,
    name: str,
    scopes: _typing.Sequence[str],
) -> list[catalog_mod.VariantEntry]:
    """Return every entry of ``contract`` named ``name`` that lives in any of ``scopes``."""
    return [
        e
        for e in entries
        if e.contract is contract and e.name == name and any(e.in_scope(s) for s in scopes)
    ]


class Resolver:
    """
    Resolves named variants from a catalog, searching configured scopes.

    Results are memoized per (contract, name); the memo is dropped whenever
    the catalog changes.
    """

    def __init__(
        self,
        catalog: catalog_mod.Catalog | None = None,
        scopes: _typing.Sequence[str] = (),
    ) -> None:
        """
        Initialize the resolver.

        Args:
            catalog: Catalog to search. Defaults to the process-wide catalog.
            scopes: Scopes in priority order; the first wins on ambiguity.
        """
        self._catalog = catalog if catalog is not None else catalog_mod.default_catalog()
        self._scopes = tuple(scopes)
        self._memo: dict[tuple[_typing.Any, str], catalog_mod.VariantEntry] = {}
        self._memo_revision = self._catalog.revision

    @property
    def catalog(self) -> catalog_mod.Catalog:
        """The catalog being searched."""
        return self._catalog

    @property
    def scopes(self) -> tuple[str, ...]:
        """Configured scopes in priority order."""
        return self._scopes

    def resolve_entry(self, contract: _typing.Any, name: str) -> catalog_mod.VariantEntry:
        """
        Resolve the catalog entry for ``contract`` named ``name``.

        Raises:
            InvalidVariantNameError: Malformed name, or a name the contract
                does not know in any scope.
            VariantNotFoundError: No match in the configured scopes.
            AmbiguousVariantError: Several matches even in the first scope.
        """
        name = _check_name(contract, name)

        if self._memo_revision != self._catalog.revision:
            self._memo.clear()
            self._memo_revision = self._catalog.revision
        cached = self._memo.get((contract, name))
        if cached is not None:
            return cached

        entry = self._resolve(contract, name)
        self._memo[(contract, name)] = entry
        return entry

    def resolve(self, contract: _typing.Any, name: str) -> _typing.Any:
        """Resolve and return the implementation (see ``resolve_entry``)."""
        return self.resolve_entry(contract, name).implementation

    def _resolve(self, contract: _typing.Any, name: str) -> catalog_mod.VariantEntry:
        entries = self._catalog.entries(contract)

        matches = find(entries, contract, name, self._scopes)
        if len(matches) == 1:
            return matches[0]

        if not matches:
            known = {e.name for e in entries}
            if known and name not in known:
                raise errors.InvalidVariantNameError(
                    contract,
                    name,
                    f"no variant with this name exists (known: {', '.join(sorted(known))})",
                )
            raise errors.VariantNotFoundError(contract, name, self._scopes)

        first_scope = self._scopes[0]
        _logger.debug(
            "Variant %s matched %d scopes, retrying in first scope %s",
            name,
            len(matches),
            first_scope,
        )
        narrowed = find(entries, contract, name, [first_scope])
        if len(narrowed) == 1:
            return narrowed[0]
        if not narrowed:
            raise errors.VariantNotFoundError(contract, name, [first_scope])
        raise errors.AmbiguousVariantError(
            contract, name, first_scope, [e.scope for e in narrowed]
        )

    def with_scopes(self, scopes: _typing.Sequence[str]) -> Resolver:
        """Create a resolver over the same catalog with different scopes."""
        return Resolver(self._catalog, scopes)
