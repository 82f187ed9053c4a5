"""
Data extractors for reading a field out of a complex stored value.

An extractor pairs the storage key holding the raw value with a function
that pulls the interesting part out of it, so callers do not need to know
the raw shape (for example one field of a recorded HTTP response).
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import typing as _typing

import questline.storage.keys as keys

T = _typing.TypeVar("T")


@_dataclasses.dataclass(frozen=True)
class DataExtractor(_typing.Generic[T]):
    """
    Reads a value derived from the raw value stored under ``key``.

    Attributes:
        key: Storage key of the raw value.
        extract: Function applied to the raw value.
    """

    key: _typing.Hashable
    extract: _typing.Callable[[_typing.Any], T]

    def __call__(self, raw: _typing.Any) -> T:
        return self.extract(raw)


def static_test_data(key: str) -> DataExtractor[_typing.Any]:
    """
    Create an extractor for one entry of the static test data map.

    Args:
        key: Entry name inside the STATIC_DATA mapping.

    Returns:
        Extractor reading ``STATIC_DATA[key]``; a missing map or entry reads as None.
    """

    def _extract(raw: _typing.Any) -> _typing.Any:
        if not isinstance(raw, _abc.Mapping):
            return None
        return raw.get(key)

    return DataExtractor(keys.StorageKeys.STATIC_DATA, _extract)


def field(key: _typing.Hashable, name: str) -> DataExtractor[_typing.Any]:
    """Create an extractor returning a mapping item or attribute ``name`` of the stored value."""

    def _extract(raw: _typing.Any) -> _typing.Any:
        if isinstance(raw, _abc.Mapping):
            return raw.get(name)
        return getattr(raw, name, None)

    return DataExtractor(key, _extract)
