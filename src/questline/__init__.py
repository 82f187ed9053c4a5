"""
Questline - test orchestration core

Shared substrate for multi-domain test flows: scoped storage, variant
discovery, capability composition, polling and lifecycle hooks.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("questline")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Questline Contributors"

from questline.config import Settings  # noqa: E402
from questline.execution import QuestGroup, QuestOutcome  # noqa: E402

__all__ = ["__version__", "__version_info__", "QuestGroup", "QuestOutcome", "Settings"]
