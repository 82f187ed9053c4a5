"""
Logging setup and the quest log facade.

Modules log through their own ``logging.getLogger(__name__)``. Test-flow
messages meant for people reading a run (ring switches, data creation,
validations) go through LogQuest, which writes to the ``questline.quest``
logger with two extra levels:

- EXTENDED (15): detail between DEBUG and INFO (storage reads, data creation)
- VALIDATION (25): validation outcomes
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import rich.logging as _rich_logging

if _typing.TYPE_CHECKING:
    import questline.config.settings as settings_mod

EXTENDED = 15
VALIDATION = 25

_logging.addLevelName(EXTENDED, "EXTENDED")
_logging.addLevelName(VALIDATION, "VALIDATION")

QUEST_LOGGER_NAME = "questline.quest"


class LogQuest:
    """Facade over the quest logger with the extra levels."""

    _logger = _logging.getLogger(QUEST_LOGGER_NAME)

    @classmethod
    def info(cls, message: str, *args: _typing.Any) -> None:
        cls._logger.info(message, *args)

    @classmethod
    def extended(cls, message: str, *args: _typing.Any) -> None:
        cls._logger.log(EXTENDED, message, *args)

    @classmethod
    def validation(cls, message: str, *args: _typing.Any) -> None:
        cls._logger.log(VALIDATION, message, *args)

    @classmethod
    def warning(cls, message: str, *args: _typing.Any) -> None:
        cls._logger.warning(message, *args)

    @classmethod
    def error(cls, message: str, *args: _typing.Any) -> None:
        cls._logger.error(message, *args)

    @classmethod
    def debug(cls, message: str, *args: _typing.Any) -> None:
        cls._logger.debug(message, *args)


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    resolved = _logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(
    settings: settings_mod.Settings | None = None,
    *,
    level: str | int | None = None,
) -> _logging.Handler:
    """
    Install a handler on the ``questline`` logger.

    Uses rich.logging.RichHandler unless disabled in settings. Calling this
    again replaces the handler installed previously.

    Args:
        settings: Settings supplying logging.level / logging.rich.
        level: Explicit level, overriding settings.

    Returns:
        The installed handler.
    """
    use_rich = True
    show_path = False
    effective: str | int = "INFO"
    if settings is not None:
        use_rich = settings.logging.rich
        show_path = settings.logging.show_path
        effective = settings.logging.level
    if level is not None:
        effective = level

    root = _logging.getLogger("questline")
    for handler in list(root.handlers):
        if getattr(handler, "_questline_handler", False):
            root.removeHandler(handler)

    handler: _logging.Handler
    if use_rich:
        handler = _rich_logging.RichHandler(show_path=show_path, rich_tracebacks=True)
        handler.setFormatter(_logging.Formatter("%(message)s"))
    else:
        handler = _logging.StreamHandler()
        handler.setFormatter(
            _logging.Formatter("%(asctime)s %(levelname)-10s %(name)s - %(message)s")
        )
    handler._questline_handler = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(_parse_level(effective))
    return handler
