"""
Test data: deferred values, forges, journeys and cleanup.

Example usage:
    from questline.data import Late, data_forge, data_ripper

    @data_forge("ADMIN_USER")
    def admin_user():
        return {"name": "admin", "role": "owner"}

    @data_ripper("DELETE_USERS")
    def delete_users(quest):
        ...
"""

from questline.data.forge import DataForge, Materializer, data_forge
from questline.data.journeys import (
    JourneyData,
    JourneyDeclaration,
    JourneyRunner,
    PreQuestJourney,
    journey,
)
from questline.data.late import Late
from questline.data.ripper import CleanupFailure, CleanupRegistry, DataRipper, data_ripper
from questline.data.static import StaticDataProvider, load_static_data, static_data_provider

__all__ = [
    "CleanupFailure",
    "CleanupRegistry",
    "DataForge",
    "DataRipper",
    "JourneyData",
    "JourneyDeclaration",
    "JourneyRunner",
    "Late",
    "Materializer",
    "PreQuestJourney",
    "StaticDataProvider",
    "data_forge",
    "data_ripper",
    "journey",
    "load_static_data",
    "static_data_provider",
]
