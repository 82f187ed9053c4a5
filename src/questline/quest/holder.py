"""
Per-thread holder of the quest currently being executed.

Test groups may run in different threads; each thread sees only the quest
it installed.
"""

from __future__ import annotations

import threading as _threading
import typing as _typing

if _typing.TYPE_CHECKING:
    import questline.quest.super_quest as super_quest

_local = _threading.local()


def set_current(quest: super_quest.SuperQuest) -> None:
    """Install ``quest`` as the current quest of this thread."""
    _local.quest = quest


def current() -> super_quest.SuperQuest | None:
    """Get the current quest of this thread, or None."""
    return getattr(_local, "quest", None)


def require_current() -> super_quest.SuperQuest:
    """
    Get the current quest of this thread.

    Raises:
        RuntimeError: If no quest is installed.
    """
    quest = current()
    if quest is None:
        raise RuntimeError("No quest is active in this thread")
    return quest


def clear() -> None:
    """Remove the current quest of this thread."""
    _local.__dict__.pop("quest", None)
