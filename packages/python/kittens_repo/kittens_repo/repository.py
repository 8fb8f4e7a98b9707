"""Async persistence layer for kittens on top of ``db_core.DocumentStore``."""

from __future__ import annotations

from typing import List, Optional

from bson import ObjectId
from db_core import AutoIncrementAllocator, DocumentStore, RangeFilter, StoreError
from loguru import logger
from pydantic import ValidationError

from .models import Kitten

MODEL_NAME = "Kitten"
IDX_FIELD = "idx"
REQUIRED_FIELDS = ("name",)


def _doc_to_model(doc: dict) -> Kitten:
    try:
        return Kitten(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            idx=doc.get(IDX_FIELD),
            name=doc["name"],
            age=doc.get("age"),
            height=doc.get("height"),
            birth=doc.get("birth"),
        )
    except (KeyError, ValidationError) as exc:
        raise StoreError(f"malformed kitten document {doc.get('_id')}") from exc


def _model_to_doc(kitten: Kitten) -> dict:
    # id and idx are assigned by the store and the allocator.
    return kitten.model_dump(exclude={"id", IDX_FIELD}, exclude_none=True)


class KittenRepository:
    """Typed access to the ``kittens`` collection.

    Call ``setup()`` once after connecting; it declares the required fields and
    registers the ``idx`` allocator.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self._allocator: Optional[AutoIncrementAllocator] = None

    async def setup(self, start_at: int = 1, increment: int = 1, auto_increment: bool = True) -> None:
        self.store.require_fields(MODEL_NAME, *REQUIRED_FIELDS)
        if not auto_increment:
            return
        self._allocator = AutoIncrementAllocator(
            self.store.connection,
            MODEL_NAME,
            field=IDX_FIELD,
            start_at=start_at,
            increment=increment,
        )
        await self.store.register_auto_increment(self._allocator)

    async def save(self, kitten: Kitten) -> Kitten:
        """Persist ``kitten`` and return the stored record with ``id``/``idx``."""

        doc = await self.store.insert(MODEL_NAME, _model_to_doc(kitten))
        saved = _doc_to_model(doc)
        logger.debug("saved kitten {name} idx={idx}", name=saved.name, idx=saved.idx)
        return saved

    async def list_all(self) -> List[Kitten]:
        docs = await self.store.find_all(MODEL_NAME)
        return [_doc_to_model(doc) for doc in docs]

    async def find_one_by_name(self, name: str) -> Optional[Kitten]:
        doc = await self.store.find_one_by_field(MODEL_NAME, "name", name)
        return _doc_to_model(doc) if doc else None

    async def find_by_name(self, name: str) -> List[Kitten]:
        docs = await self.store.find_all_by_field(MODEL_NAME, "name", name)
        return [_doc_to_model(doc) for doc in docs]

    async def count_in_range(
        self,
        height: Optional[RangeFilter] = None,
        birth: Optional[RangeFilter] = None,
    ) -> int:
        """Count kittens whose height and birth both fall in the given ranges.

        A range left as ``None`` does not constrain its field.
        """

        filters = {}
        if height is not None:
            filters["height"] = height
        if birth is not None:
            filters["birth"] = birth
        return await self.store.count_in_range(MODEL_NAME, filters)

    async def delete_many(self, ids: List[str]) -> int:
        object_ids = [ObjectId(i) if ObjectId.is_valid(i) else i for i in ids]
        return await self.store.delete_by_ids(MODEL_NAME, object_ids)

    async def next_idx(self) -> int:
        return await self._require_allocator().next_count()

    async def reset_idx(self) -> int:
        return await self._require_allocator().reset_count()

    def _require_allocator(self) -> AutoIncrementAllocator:
        if self._allocator is None:
            raise RuntimeError("KittenRepository.setup() was not called with auto_increment enabled")
        return self._allocator
