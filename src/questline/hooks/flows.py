"""
The hook flow contract.
"""

from __future__ import annotations

import typing as _typing

import questline.discovery.catalog as catalog_mod

F = _typing.TypeVar("F")


@_typing.runtime_checkable
class HookFlow(_typing.Protocol):
    """
    A before/after hook.

    ``outputs`` is shared by all hooks of one phase run; whatever a flow
    writes there is readable afterwards through ``Storage.hook_data``.
    """

    def __call__(
        self,
        service: _typing.Any,
        outputs: dict[str, _typing.Any],
        arguments: list[str],
    ) -> None: ...


def hook_flow(name: str, *, scope: str | None = None) -> _typing.Callable[[F], F]:
    """Register the decorated callable as a HookFlow in the default catalog."""
    return catalog_mod.variant(HookFlow, name, scope=scope)
