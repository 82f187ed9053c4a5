"""
Retrieval helpers for test classes.

Test classes that mix in BaseQuest can read values from the storage of the
quest running in the current thread without being handed the quest.
"""

from __future__ import annotations

import typing as _typing

import questline.constants as constants
import questline.log as log
import questline.quest.holder as holder
import questline.storage as storage_mod

T = _typing.TypeVar("T")


class BaseQuest:
    """Mixin with storage retrieval shortcuts for the current quest."""

    @staticmethod
    def retrieve(
        key: _typing.Any,
        type_: type[T],
        *,
        sub: _typing.Hashable | None = None,
        index: int | None = None,
    ) -> T:
        """
        Read ``key`` from the current quest's storage.

        Args:
            key: Storage key or DataExtractor.
            type_: Expected type.
            sub: Namespace to read from; the storage root when omitted.
            index: Element to read when the stored value is a sequence.
        """
        log.LogQuest.extended(constants.RETRIEVAL_LOG_TEMPLATE.format(key, type_.__name__))
        store = holder.require_current().storage
        if sub is not None:
            store = store.sub(sub)
        return store.get(key, type_, index)

    @staticmethod
    def hook_data(key: _typing.Hashable, type_: type[T]) -> T:
        """Read one output of the BEFORE hooks."""
        log.LogQuest.extended(constants.RETRIEVAL_LOG_TEMPLATE.format(key, type_.__name__))
        return holder.require_current().storage.hook_data(key, type_)

    @staticmethod
    def default_storage() -> storage_mod.Storage:
        """The default sub-store of the current quest."""
        return holder.require_current().storage.sub()
