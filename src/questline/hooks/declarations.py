"""
Hook declarations.

A declaration names a hook flow, the phase it runs in and its position
relative to the other hooks of that phase. Declarations are either built
in code or loaded from a YAML file:

```yaml
hooks:
  - name: SEED_USERS
    when: before
    order: 1
    arguments: [admin, guest]
  - name: DROP_USERS
    when: after
```
"""

from __future__ import annotations

import enum as _enum
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import yaml as _yaml


class HookTiming(_enum.Enum):
    """Phase of a test group a hook runs in."""

    BEFORE = "before"
    """Before any test of the group."""

    AFTER = "after"
    """After every test of the group."""


class HookDeclaration(_pydantic.BaseModel):
    """One declared hook."""

    model_config = _pydantic.ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    timing: HookTiming = _pydantic.Field(alias="when")
    """Phase the hook runs in."""

    name: str
    """Name of the hook flow variant to resolve."""

    order: int = 0
    """Lower runs first; equal orders keep declaration order."""

    arguments: list[str] = _pydantic.Field(default_factory=list)
    """Positional string arguments passed to the flow."""

    @_pydantic.field_validator("timing", mode="before")
    @classmethod
    def _normalize_timing(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @_pydantic.field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("hook name must not be empty")
        return value


def before(name: str, *, order: int = 0, arguments: _typing.Sequence[str] = ()) -> HookDeclaration:
    """Declare a BEFORE hook."""
    return HookDeclaration(timing=HookTiming.BEFORE, name=name, order=order, arguments=list(arguments))


def after(name: str, *, order: int = 0, arguments: _typing.Sequence[str] = ()) -> HookDeclaration:
    """Declare an AFTER hook."""
    return HookDeclaration(timing=HookTiming.AFTER, name=name, order=order, arguments=list(arguments))


def plan(
    declarations: _typing.Iterable[HookDeclaration],
    timing: HookTiming,
) -> list[HookDeclaration]:
    """
    Select the hooks of one phase in execution order.

    Sorting is stable, so hooks with equal ``order`` keep their declaration
    order.
    """
    return sorted((d for d in declarations if d.timing is timing), key=lambda d: d.order)


class HooksConfig(_pydantic.BaseModel):
    """Contents of a hooks YAML file."""

    model_config = _pydantic.ConfigDict(extra="forbid")

    version: int = 1
    """Config version."""

    hooks: list[HookDeclaration] = _pydantic.Field(default_factory=list)
    """Declared hooks in file order."""

    def for_timing(self, timing: HookTiming) -> list[HookDeclaration]:
        """Hooks of one phase in execution order."""
        return plan(self.hooks, timing)


def load_hooks_yaml(path: _pathlib.Path) -> HooksConfig:
    """
    Load hook declarations from a YAML file.

    Args:
        path: Path to the hooks file.

    Returns:
        Parsed HooksConfig.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Hooks file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = _yaml.safe_load(content) or {}
        return HooksConfig.model_validate(data)
    except _yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except _pydantic.ValidationError as e:
        raise ValueError(f"Invalid hooks file {path}: {e}") from e
