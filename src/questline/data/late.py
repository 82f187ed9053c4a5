"""
Deferred values.
"""

from __future__ import annotations

import threading as _threading
import typing as _typing

T = _typing.TypeVar("T")

_UNSET = object()


class Late(_typing.Generic[T]):
    """
    A value produced on demand.

    A plain Late calls its factory on every ``create()``. Use
    ``Late.memoized`` when every caller must see the same instance.
    """

    def __init__(self, factory: _typing.Callable[[], T]) -> None:
        if not callable(factory):
            raise TypeError(f"Late factory must be callable, got {type(factory).__name__}")
        self._factory = factory

    @classmethod
    def memoized(cls, factory: _typing.Callable[[], T]) -> Late[T]:
        """Create a Late that calls ``factory`` once and caches the value."""
        return _MemoizedLate(factory)

    @property
    def factory(self) -> _typing.Callable[[], T]:
        """The wrapped factory."""
        return self._factory

    def create(self) -> T:
        """Produce the value."""
        return self._factory()

    def __call__(self) -> T:
        return self.create()

    def __repr__(self) -> str:
        name = getattr(self._factory, "__qualname__", repr(self._factory))
        return f"{type(self).__name__}({name})"


class _MemoizedLate(Late[T]):
    def __init__(self, factory: _typing.Callable[[], T]) -> None:
        super().__init__(factory)
        self._value: _typing.Any = _UNSET
        self._lock = _threading.Lock()

    def create(self) -> T:
        with self._lock:
            if self._value is _UNSET:
                self._value = self._factory()
            return _typing.cast(T, self._value)
