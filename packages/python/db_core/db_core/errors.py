"""Error taxonomy surfaced by the data access layer."""


class DataAccessError(Exception):
    """Base class for every failure reported by db_core."""


class StoreConnectionError(DataAccessError):
    """Raised when the store cannot be reached or no connection is open."""


class RecordValidationError(DataAccessError):
    """Raised when a document misses a required field before it is written."""

    def __init__(self, collection: str, missing: list[str]):
        self.collection = collection
        self.missing = missing
        super().__init__(f"{collection}: missing required field(s) {', '.join(missing)}")


class StoreError(DataAccessError):
    """Raised when the store rejects a read or a write (e.g. duplicate key)."""


class AllocationError(StoreError):
    """Raised when an auto-increment counter cannot be reserved."""
