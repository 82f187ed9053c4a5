"""
Scoped storage for Questline.

Example usage:
    from questline.storage import Storage, StorageKeys

    storage = Storage()
    storage.sub(StorageKeys.ARGUMENTS).put("USER", {"id": 7})
    user = storage.sub(StorageKeys.ARGUMENTS).get("USER", dict)
"""

from questline.storage.extractors import DataExtractor, field, static_test_data
from questline.storage.keys import StorageKeys
from questline.storage.store import Storage, zero_value

__all__ = [
    "DataExtractor",
    "Storage",
    "StorageKeys",
    "field",
    "static_test_data",
    "zero_value",
]
