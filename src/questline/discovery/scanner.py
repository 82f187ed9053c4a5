"""
Scope scanning.

Variants register themselves when their module is imported. Scanning a
scope imports the scope module and, when it is a package, every module
below it, so that all of its registrations have run before resolution.
"""

from __future__ import annotations

import importlib as _importlib
import logging as _logging
import pkgutil as _pkgutil
import types as _types
import typing as _typing

import questline.errors as errors

_logger = _logging.getLogger(__name__)


def _import(name: str) -> _types.ModuleType:
    try:
        return _importlib.import_module(name)
    except Exception as e:
        raise errors.ScopeImportError(name, e) from e


def scan_scope(scope: str) -> list[str]:
    """
    Import a scope and all of its sub-modules.

    Args:
        scope: Dotted module or package name.

    Returns:
        Names of the modules imported, scope first.

    Raises:
        ScopeImportError: If the scope or one of its sub-modules fails to import.
    """
    module = _import(scope)
    imported = [module.__name__]

    search_path = getattr(module, "__path__", None)
    if search_path is None:
        return imported

    for info in _pkgutil.walk_packages(search_path, prefix=f"{scope}.", onerror=_raise_walk_error):
        _import(info.name)
        imported.append(info.name)

    return imported


def _raise_walk_error(name: str) -> None:
    raise errors.ScopeImportError(name, ImportError(f"cannot walk package {name}"))


def scan(scopes: _typing.Iterable[str]) -> list[str]:
    """
    Import every scope in ``scopes``.

    Returns:
        Names of all modules imported, in scan order.
    """
    imported: list[str] = []
    for scope in scopes:
        names = scan_scope(scope)
        _logger.debug("Scanned scope %s (%d modules)", scope, len(names))
        imported.extend(names)
    return imported
