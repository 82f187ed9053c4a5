"""
Execution context of a test and its capability facades.
"""

from questline.quest.base import BaseQuest
from questline.quest.decorators import (
    ComposedQuest,
    DecoratorsFactory,
    decorate,
    default_factory,
)
from questline.quest.quest import Quest
from questline.quest.ring import Ring
from questline.quest.super_quest import SuperQuest

__all__ = [
    "BaseQuest",
    "ComposedQuest",
    "DecoratorsFactory",
    "Quest",
    "Ring",
    "SuperQuest",
    "decorate",
    "default_factory",
]
