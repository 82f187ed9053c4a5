"""
Scoped storage shared by everything that runs inside one quest.

Storage is a two-level mapping: namespace -> sub-store, and inside each
store key -> value. Namespaces are created on first access, so a lookup
never fails because a namespace does not exist yet. Values are untyped at
rest; readers state the type they expect and the value is validated (and
coerced where pydantic can) at read time.

Storage is not synchronized. One quest is driven by a single thread.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import pydantic as _pydantic

import questline.constants as constants
import questline.errors as errors
import questline.storage.extractors as extractors
import questline.storage.keys as keys

_logger = _logging.getLogger(__name__)

T = _typing.TypeVar("T")

# Types whose no-argument constructor yields their zero value
_ZERO_CONSTRUCTIBLE: frozenset[type] = frozenset(
    {int, float, complex, str, bytes, bool, list, dict, tuple, set, frozenset}
)

_adapters: dict[_typing.Any, _pydantic.TypeAdapter[_typing.Any]] = {}


def zero_value(type_: _typing.Any) -> _typing.Any:
    """
    Return the zero value for ``type_``.

    Builtin scalars and containers yield their empty instance; every other
    type (including parametrized generics of those) yields None.
    """
    origin = _typing.get_origin(type_)
    if origin is None and type_ in _ZERO_CONSTRUCTIBLE:
        return type_()
    if origin in _ZERO_CONSTRUCTIBLE:
        return origin()
    return None


def _adapter(type_: _typing.Any) -> _pydantic.TypeAdapter[_typing.Any]:
    try:
        adapter = _adapters.get(type_)
    except TypeError:
        # Unhashable type expression
        return _pydantic.TypeAdapter(type_)
    if adapter is None:
        adapter = _pydantic.TypeAdapter(type_)
        _adapters[type_] = adapter
    return adapter


def _as_type(value: _typing.Any, type_: _typing.Any, key: _typing.Any) -> _typing.Any:
    """Validate ``value`` as ``type_``, coercing through pydantic when needed."""
    if type_ is None or type_ is _typing.Any:
        return value
    if isinstance(type_, type) and isinstance(value, type_):
        return value
    try:
        return _adapter(type_).validate_python(value)
    except _pydantic.ValidationError as e:
        raise errors.StorageTypeError(
            f"Value stored under {key!r} is {type(value).__name__}, "
            f"cannot be read as {getattr(type_, '__name__', type_)}: {e}"
        ) from e


class Storage:
    """
    Namespaced key/value store owned by one execution context.

    The object itself is a store; ``sub()`` returns nested stores that
    are created on first access and are the same object on every call.
    """

    def __init__(self, *, default_namespace: str = constants.DEFAULT_NAMESPACE) -> None:
        """
        Initialize an empty storage.

        Args:
            default_namespace: Namespace returned by ``sub()`` without arguments.
        """
        self._default_namespace = default_namespace
        self._data: dict[_typing.Hashable, _typing.Any] = {}
        self._subs: dict[_typing.Hashable, Storage] = {}

    @property
    def default_namespace(self) -> str:
        """Namespace used when ``sub()`` is called without one."""
        return self._default_namespace

    def sub(self, namespace: _typing.Hashable | None = None) -> Storage:
        """
        Get the sub-store for ``namespace``, creating it if absent.

        Args:
            namespace: Namespace key. None selects the default namespace.

        Returns:
            The sub-store; repeated calls return the same object.
        """
        if namespace is None:
            namespace = self._default_namespace
        store = self._subs.get(namespace)
        if store is None:
            store = Storage(default_namespace=self._default_namespace)
            self._subs[namespace] = store
        return store

    def put(self, key: _typing.Hashable, value: _typing.Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        self._data[key] = value

    @_typing.overload
    def get(
        self,
        key: extractors.DataExtractor[T],
        type_: type[T],
        index: int | None = None,
    ) -> T: ...

    @_typing.overload
    def get(
        self,
        key: _typing.Hashable,
        type_: type[T],
        index: int | None = None,
    ) -> T: ...

    @_typing.overload
    def get(
        self,
        key: _typing.Hashable,
        type_: None = None,
        index: int | None = None,
    ) -> _typing.Any: ...

    def get(
        self,
        key: _typing.Any,
        type_: _typing.Any = None,
        index: int | None = None,
    ) -> _typing.Any:
        """
        Read a value as ``type_``.

        Args:
            key: Storage key, or a DataExtractor whose key holds the raw value.
            type_: Expected type. None returns the raw value untouched.
            index: When the stored value is a sequence, read the element at
                this position (before any extraction).

        Returns:
            The validated value, or the zero value of ``type_`` when the
            key is absent.

        Raises:
            StorageTypeError: If the value cannot be read as ``type_``, or
                ``index`` is given for a value that is not a sequence.
            IndexError: If ``index`` is out of range.
        """
        extractor: extractors.DataExtractor[_typing.Any] | None = None
        if isinstance(key, extractors.DataExtractor):
            extractor = key
            key = extractor.key

        raw = self._data.get(key)
        if raw is None:
            return zero_value(type_)

        if index is not None:
            if not isinstance(raw, _abc.Sequence) or isinstance(raw, (str, bytes)):
                raise errors.StorageTypeError(
                    f"Value stored under {key!r} is {type(raw).__name__}, not a sequence"
                )
            raw = raw[index]

        value = extractor(raw) if extractor is not None else raw
        if value is None:
            return zero_value(type_)
        return _as_type(value, type_, key)

    def hook_data(self, key: _typing.Hashable, type_: _typing.Any = None) -> _typing.Any:
        """
        Read one entry of the hook output map.

        Hook runs store their output mapping under StorageKeys.HOOKS; this
        returns ``outputs[key]`` validated as ``type_``.
        """
        outputs = self._data.get(keys.StorageKeys.HOOKS)
        if not isinstance(outputs, _abc.Mapping) or outputs.get(key) is None:
            return zero_value(type_)
        return _as_type(outputs[key], type_, key)

    def keys(self) -> list[_typing.Hashable]:
        """Keys stored directly in this store (not in sub-stores)."""
        return list(self._data)

    def namespaces(self) -> list[_typing.Hashable]:
        """Namespaces created so far."""
        return list(self._subs)

    def clear(self) -> None:
        """Drop all values and sub-stores."""
        self._data.clear()
        self._subs.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Storage(keys={len(self._data)}, namespaces={len(self._subs)})"
