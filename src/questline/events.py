"""
Events exposed to reporting collaborators.

The core does not render or persist reports. It emits QuestEvent objects
(hook start/stop, validations, cleanup results) to whatever listeners a
host subscribed, and leaves formatting to them.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import datetime as _datetime
import enum as _enum
import logging as _logging
import typing as _typing

_logger = _logging.getLogger(__name__)


class EventKind(_enum.Enum):
    """Kinds of events emitted by the core."""

    HOOK_STARTED = "hook_started"
    """A hook flow is about to run."""

    HOOK_FINISHED = "hook_finished"
    """A hook flow completed."""

    HOOK_FAILED = "hook_failed"
    """A hook flow raised."""

    JOURNEY_STARTED = "journey_started"
    """A pre-test journey is about to run."""

    JOURNEY_FINISHED = "journey_finished"
    """A pre-test journey completed."""

    VALIDATION = "validation"
    """An AssertionResult was produced."""

    CLEANUP_FINISHED = "cleanup_finished"
    """A cleanup action completed."""

    CLEANUP_FAILED = "cleanup_failed"
    """A cleanup action raised."""


@_dataclasses.dataclass(frozen=True)
class QuestEvent:
    """
    One event.

    Attributes:
        kind: What happened.
        name: Identifier of the hook, journey or cleanup involved.
        payload: Kind-specific data (timing, arguments, AssertionResult, error).
        timestamp: When the event was emitted (UTC).
    """

    kind: EventKind
    name: str
    payload: dict[str, _typing.Any] = _dataclasses.field(default_factory=dict)
    timestamp: _datetime.datetime = _dataclasses.field(
        default_factory=lambda: _datetime.datetime.now(_datetime.timezone.utc)
    )


Listener = _typing.Callable[[QuestEvent], None]


class EventBus:
    """Fan-out of QuestEvents to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Add a listener; it receives every later event."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        """Remove a listener if present."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(
        self,
        kind: EventKind,
        name: str,
        **payload: _typing.Any,
    ) -> QuestEvent:
        """
        Emit an event to all listeners.

        A failing listener is logged and skipped.
        """
        event = QuestEvent(kind=kind, name=name, payload=payload)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                _logger.warning("Event listener %r failed on %s: %s", listener, kind.value, e)
        return event
