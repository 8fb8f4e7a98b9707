"""Async document operations shared by every domain repository."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Mapping, Optional

from loguru import logger
from pymongo.errors import ConnectionFailure, PyMongoError

from .autoincrement import AutoIncrementAllocator
from .connection import MongoConnection, collection_name_for
from .errors import RecordValidationError, StoreConnectionError, StoreError
from .filters import RangeFilter
from .typing import MongoDocument


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Translate driver exceptions raised inside the block."""

    try:
        yield
    except ConnectionFailure as exc:
        raise StoreConnectionError(f"{action}: store unreachable") from exc
    except PyMongoError as exc:
        raise StoreError(f"{action} failed: {exc}") from exc


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _check_field(field: str) -> None:
    if not field or field.startswith("$"):
        raise ValueError(f"invalid field name {field!r}")


class DocumentStore:
    """Insert and query documents through one ``MongoConnection``.

    Collections are addressed by logical name (``"Kitten"``), resolved with
    ``collection_name_for``. Required fields and auto-increment allocators are
    declared per collection.
    """

    def __init__(self, connection: MongoConnection):
        self.connection = connection
        self._required: dict[str, tuple[str, ...]] = {}
        self._allocators: dict[str, AutoIncrementAllocator] = {}

    def require_fields(self, collection: str, *fields: str) -> None:
        self._required[collection_name_for(collection)] = tuple(fields)

    async def register_auto_increment(self, allocator: AutoIncrementAllocator) -> None:
        """Bind ``allocator`` to its collection and index the allocated field."""

        await allocator.register()
        with _store_errors(f"index {allocator.model}.{allocator.field}"):
            await self.connection.collection(allocator.model).create_index(
                allocator.field, unique=True
            )
        self._allocators[allocator.model] = allocator

    def allocator_for(self, collection: str) -> Optional[AutoIncrementAllocator]:
        return self._allocators.get(collection_name_for(collection))

    async def insert(self, collection: str, document: MongoDocument) -> dict:
        """Validate, number and write ``document``; return the stored copy."""

        name = collection_name_for(collection)
        missing = [f for f in self._required.get(name, ()) if _is_blank(document.get(f))]
        if missing:
            raise RecordValidationError(name, missing)

        record = dict(document)
        allocator = self._allocators.get(name)
        if allocator is not None:
            record[allocator.field] = await allocator.allocate()

        with _store_errors(f"insert into {name}"):
            result = await self.connection.collection(name).insert_one(record)
        record["_id"] = result.inserted_id
        logger.debug("inserted {id} into {name}", id=result.inserted_id, name=name)
        return record

    async def find_all(self, collection: str) -> list[dict]:
        name = collection_name_for(collection)
        with _store_errors(f"find in {name}"):
            cursor = self.connection.collection(name).find({})
            return [doc async for doc in cursor]

    async def find_one_by_field(self, collection: str, field: str, value: Any) -> Optional[dict]:
        _check_field(field)
        name = collection_name_for(collection)
        with _store_errors(f"find_one in {name}"):
            return await self.connection.collection(name).find_one({field: {"$eq": value}})

    async def find_all_by_field(self, collection: str, field: str, value: Any) -> list[dict]:
        _check_field(field)
        name = collection_name_for(collection)
        with _store_errors(f"find in {name}"):
            cursor = self.connection.collection(name).find({field: {"$eq": value}})
            return [doc async for doc in cursor]

    async def count_in_range(self, collection: str, filters: Mapping[str, RangeFilter]) -> int:
        """Count documents matching every range in ``filters``."""

        for field in filters:
            _check_field(field)
        name = collection_name_for(collection)
        query = {field: bounds.to_query() for field, bounds in filters.items()}
        with _store_errors(f"count in {name}"):
            return await self.connection.collection(name).count_documents(query)

    async def delete_by_ids(self, collection: str, ids: Iterable[Any]) -> int:
        ids = list(ids)
        if not ids:
            return 0
        name = collection_name_for(collection)
        with _store_errors(f"delete from {name}"):
            result = await self.connection.collection(name).delete_many({"_id": {"$in": ids}})
        logger.info("deleted {count} document(s) from {name}", count=result.deleted_count, name=name)
        return result.deleted_count
