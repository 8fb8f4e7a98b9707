"""
Shared fixtures for the test suite.

Every test gets its own in-memory Motor client (mongomock-motor), so no
MongoDB server is needed and tests never see each other's documents.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from db_core import DocumentStore, MongoConnection, MongoSettings
from kittens_repo import KittenRepository

TEST_URI = "mongodb://localhost:27017/kittens_test"


@pytest.fixture()
def mongo_settings() -> MongoSettings:
    return MongoSettings(uri=TEST_URI, db_name="unused", server_selection_timeout_ms=100)


@pytest.fixture()
def unreachable_client_factory():
    """Client factory whose server never answers the ping."""

    db = MagicMock()
    db.command = AsyncMock(side_effect=ServerSelectionTimeoutError("No servers found yet"))
    client = MagicMock()
    client.__getitem__.return_value = db

    factory = MagicMock(return_value=client)
    factory.client = client
    return factory


@pytest_asyncio.fixture()
async def connection(mongo_settings):
    conn = MongoConnection(mongo_settings, client_factory=AsyncMongoMockClient)
    await conn.connect()
    yield conn
    await conn.disconnect()


@pytest.fixture()
def store(connection) -> DocumentStore:
    return DocumentStore(connection)


@pytest_asyncio.fixture()
async def kitten_repo(store) -> KittenRepository:
    repo = KittenRepository(store)
    await repo.setup(start_at=1, increment=1)
    return repo
