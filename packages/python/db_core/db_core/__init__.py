"""Minimal async MongoDB data access shared across domain repositories.

Example usage in a domain repository:

    from db_core import DocumentStore, MongoConnection, RangeFilter

    async def tall_ones(store: DocumentStore) -> int:
        return await store.count_in_range("Kitten", {"height": RangeFilter.closed(180, 200)})
"""

from .autoincrement import COUNTERS_COLLECTION, AutoIncrementAllocator
from .connection import MongoConnection, collection_name_for
from .errors import (
    AllocationError,
    DataAccessError,
    RecordValidationError,
    StoreConnectionError,
    StoreError,
)
from .filters import RangeFilter
from .settings import MongoSettings, settings
from .store import DocumentStore

__all__ = [
    "AllocationError",
    "AutoIncrementAllocator",
    "COUNTERS_COLLECTION",
    "DataAccessError",
    "DocumentStore",
    "MongoConnection",
    "MongoSettings",
    "RangeFilter",
    "RecordValidationError",
    "StoreConnectionError",
    "StoreError",
    "collection_name_for",
    "settings",
]
