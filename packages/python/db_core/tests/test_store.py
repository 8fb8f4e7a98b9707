import pytest

from db_core import (
    DocumentStore,
    MongoConnection,
    RangeFilter,
    RecordValidationError,
    StoreConnectionError,
    StoreError,
)

SCENARIO = [
    {"name": "a", "age": 1, "height": 150, "birth": 100},
    {"name": "b", "age": 2, "height": 190, "birth": 150},
    {"name": "c", "age": 3, "height": 195, "birth": 5000},
]


async def _insert_all(store, docs, collection="Kitten"):
    return [await store.insert(collection, doc) for doc in docs]


@pytest.mark.asyncio
async def test_insert_returns_stored_copy_with_id(store):
    doc = {"name": "mk3", "age": 2}

    stored = await store.insert("Kitten", doc)

    assert stored["_id"] is not None
    assert stored["name"] == "mk3"
    assert "_id" not in doc
    assert len(await store.find_all("Kitten")) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("doc", [{"age": 3}, {"name": None}, {"name": "   "}])
async def test_missing_required_field_is_rejected_before_write(store, doc):
    store.require_fields("Kitten", "name")

    with pytest.raises(RecordValidationError) as excinfo:
        await store.insert("Kitten", doc)

    assert excinfo.value.missing == ["name"]
    assert await store.count_in_range("Kitten", {}) == 0


@pytest.mark.asyncio
async def test_find_all_by_field_returns_exact_matches(store):
    await _insert_all(store, [{"name": "a"}, {"name": "b"}, {"name": "a"}, {"name": "ab"}])

    found = await store.find_all_by_field("Kitten", "name", "a")

    assert len(found) == 2
    assert {doc["name"] for doc in found} == {"a"}


@pytest.mark.asyncio
async def test_find_by_field_treats_operator_documents_as_values(store):
    await _insert_all(store, [{"name": "a"}, {"name": "b"}])

    assert await store.find_all_by_field("Kitten", "name", {"$ne": "a"}) == []


@pytest.mark.asyncio
async def test_find_one_by_field(store):
    await _insert_all(store, SCENARIO)

    found = await store.find_one_by_field("Kitten", "name", "b")
    missing = await store.find_one_by_field("Kitten", "name", "zzz")

    assert found["height"] == 190
    assert missing is None


@pytest.mark.asyncio
async def test_invalid_field_name_is_rejected(store):
    with pytest.raises(ValueError):
        await store.find_all_by_field("Kitten", "$where", "1")
    with pytest.raises(ValueError):
        await store.count_in_range("Kitten", {"": RangeFilter(gte=1)})


@pytest.mark.asyncio
async def test_count_in_range_scenario(store):
    await _insert_all(store, SCENARIO)

    count = await store.count_in_range(
        "Kitten",
        {"height": RangeFilter.closed(180, 200), "birth": RangeFilter.closed(100, 200)},
    )

    assert count == 1


@pytest.mark.asyncio
async def test_count_in_range_bounds_are_inclusive(store):
    await _insert_all(
        store,
        [
            {"name": "low", "height": 180, "birth": 100},
            {"name": "high", "height": 200, "birth": 200},
            {"name": "out", "height": 201, "birth": 150},
        ],
    )
    closed = {"height": RangeFilter.closed(180, 200), "birth": RangeFilter.closed(100, 200)}
    half_open = {"height": RangeFilter.half_open(180, 200), "birth": RangeFilter.closed(100, 200)}

    assert await store.count_in_range("Kitten", closed) == 2
    assert await store.count_in_range("Kitten", half_open) == 1


@pytest.mark.asyncio
async def test_count_matches_constructed_fixture(store):
    docs = [{"name": f"k{i}", "height": 170 + i, "birth": 90 + i * 3} for i in range(40)]
    await _insert_all(store, docs)
    expected = sum(1 for d in docs if 180 <= d["height"] <= 200 and 100 <= d["birth"] <= 150)

    count = await store.count_in_range(
        "Kitten",
        {"height": RangeFilter.closed(180, 200), "birth": RangeFilter.closed(100, 150)},
    )

    assert count == expected


@pytest.mark.asyncio
async def test_collection_names_are_case_insensitive(store):
    await store.insert("Kitten", {"name": "a"})

    assert len(await store.find_all("KITTENS")) == 1
    assert len(await store.find_all("kitten")) == 1


@pytest.mark.asyncio
async def test_duplicate_key_surfaces_as_store_error(store):
    await store.insert("Kitten", {"_id": "same", "name": "a"})

    with pytest.raises(StoreError):
        await store.insert("Kitten", {"_id": "same", "name": "b"})


@pytest.mark.asyncio
async def test_delete_by_ids(store):
    stored = await _insert_all(store, SCENARIO)

    deleted = await store.delete_by_ids("Kitten", [stored[0]["_id"], stored[2]["_id"]])

    assert deleted == 2
    assert [doc["name"] for doc in await store.find_all("Kitten")] == ["b"]
    assert await store.delete_by_ids("Kitten", []) == 0


@pytest.mark.asyncio
async def test_operations_require_an_open_connection(mongo_settings):
    closed_store = DocumentStore(MongoConnection(mongo_settings))

    with pytest.raises(StoreConnectionError):
        await closed_store.insert("Kitten", {"name": "a"})
    with pytest.raises(StoreConnectionError):
        await closed_store.find_all("Kitten")
