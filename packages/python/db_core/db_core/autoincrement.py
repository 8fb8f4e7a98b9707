"""Auto-increment counters persisted next to the data they number.

One counter document per (collection, field) lives in ``identitycounters``::

    {"model": "kittens", "field": "idx", "count": <last issued value>}

Allocation is a single ``find_one_and_update`` with ``$inc``, so concurrent
inserts never receive the same value. The counter is the source of truth: a
record write that fails after a successful allocation leaves a gap, never a
duplicate.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from .connection import MongoConnection, collection_name_for
from .errors import AllocationError

COUNTERS_COLLECTION = "identitycounters"


class AutoIncrementAllocator:
    """Hands out ``start_at``, ``start_at + increment``, ... for one field."""

    def __init__(
        self,
        connection: MongoConnection,
        model: str,
        field: str = "idx",
        start_at: int = 0,
        increment: int = 1,
    ):
        if increment < 1:
            raise ValueError("increment must be a positive integer")
        self.connection = connection
        self.model = collection_name_for(model)
        self.field = field
        self.start_at = start_at
        self.increment = increment
        self._registered = False

    @property
    def registered(self) -> bool:
        return self._registered

    @property
    def _key(self) -> dict[str, Any]:
        return {"model": self.model, "field": self.field}

    def _counters(self):
        return self.connection.collection(COUNTERS_COLLECTION)

    async def register(self) -> None:
        """Create the counter if missing. An existing counter keeps its value."""

        counters = self._counters()
        try:
            await counters.create_index(
                [("model", ASCENDING), ("field", ASCENDING)], unique=True
            )
            await counters.update_one(
                self._key,
                {"$setOnInsert": {"count": self.start_at - self.increment}},
                upsert=True,
            )
        except DuplicateKeyError:
            # Another process created the counter between our lookup and insert.
            logger.debug("counter {model}.{field} created concurrently", model=self.model, field=self.field)
        except PyMongoError as exc:
            raise AllocationError(f"Could not register counter {self.model}.{self.field}") from exc

        self._registered = True
        logger.info(
            "auto-increment registered on {model}.{field} (start_at={start}, increment={inc})",
            model=self.model,
            field=self.field,
            start=self.start_at,
            inc=self.increment,
        )

    async def allocate(self) -> int:
        """Atomically reserve and return the next value."""

        if not self._registered:
            raise AllocationError(f"No counter registered for {self.model}.{self.field}")

        try:
            doc = await self._counters().find_one_and_update(
                self._key,
                {"$inc": {"count": self.increment}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise AllocationError(f"Could not reserve next {self.model}.{self.field}") from exc

        if doc is None:
            raise AllocationError(f"Counter {self.model}.{self.field} disappeared from the store")
        return int(doc["count"])

    async def next_count(self) -> int:
        """Value the next ``allocate()`` returns, without reserving it."""

        try:
            doc = await self._counters().find_one(self._key)
        except PyMongoError as exc:
            raise AllocationError(f"Could not read counter {self.model}.{self.field}") from exc
        if doc is None:
            return self.start_at
        return int(doc["count"]) + self.increment

    async def reset_count(self) -> int:
        """Rewind the counter so the next allocation returns ``start_at``."""

        try:
            await self._counters().update_one(
                self._key,
                {"$set": {"count": self.start_at - self.increment}},
                upsert=True,
            )
        except PyMongoError as exc:
            raise AllocationError(f"Could not reset counter {self.model}.{self.field}") from exc
        logger.warning("counter {model}.{field} reset to {start}", model=self.model, field=self.field, start=self.start_at)
        return self.start_at
