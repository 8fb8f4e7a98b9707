"""Async MongoDB connection lifecycle built on top of Motor.

A ``MongoConnection`` is created once at startup, opened with ``connect()``,
passed to the repositories that need it and closed with ``disconnect()``.
Domain repositories never build their own clients.
"""

from __future__ import annotations

from typing import Any, Optional

from loguru import logger
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import PyMongoError

from .errors import StoreConnectionError
from .settings import MongoSettings, settings as default_settings
from .typing import ClientFactory


def collection_name_for(name: str) -> str:
    """Resolve a logical entity name to its stored collection name.

    Matching is case-insensitive: ``Kitten``, ``kitten`` and ``KITTENS`` all
    resolve to ``kittens``.
    """

    lowered = name.strip().lower()
    if not lowered:
        raise ValueError("collection name must not be empty")
    if lowered.endswith("s"):
        return lowered
    return f"{lowered}s"


class MongoConnection:
    """Owns the single Motor client of the process."""

    def __init__(
        self,
        mongo_settings: Optional[MongoSettings] = None,
        client_factory: ClientFactory = AsyncIOMotorClient,
    ):
        self.settings = mongo_settings or default_settings
        self._client_factory = client_factory
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise StoreConnectionError("MongoDB connection is not open")
        return self._db

    def collection(self, name: str) -> AsyncIOMotorCollection:
        """Return the collection backing the logical entity ``name``."""

        return self.db[collection_name_for(name)]

    async def connect(self) -> "MongoConnection":
        """Open the client and verify the server answers a ``ping``.

        Failures are reported as ``StoreConnectionError`` without retrying.
        """

        if self._client is not None:
            logger.debug("connect() on an already open connection, ignoring")
            return self

        uri = self.settings.uri
        try:
            database = self.settings.database
            client = self._client_factory(
                uri, serverSelectionTimeoutMS=self.settings.server_selection_timeout_ms
            )
        except PyMongoError as exc:
            logger.error("[MongoDB Connect Error] invalid configuration for {uri}: {exc}", uri=uri, exc=exc)
            raise StoreConnectionError(f"Invalid MongoDB configuration for {uri}") from exc

        db = client[database]
        try:
            await db.command("ping")
        except PyMongoError as exc:
            client.close()
            logger.error("[MongoDB Connect Error] {uri}: {exc}", uri=uri, exc=exc)
            raise StoreConnectionError(f"Cannot reach MongoDB at {uri}") from exc

        self._client = client
        self._db = db
        logger.info("connected to mongod server {uri} (db={db})", uri=uri, db=database)
        return self

    async def ping(self) -> dict[str, Any]:
        """Run a simple ``ping`` command against the connected server."""

        try:
            await self.db.command("ping")
        except PyMongoError as exc:
            raise StoreConnectionError(f"Ping to {self.settings.uri} failed") from exc
        return {"ok": True}

    async def disconnect(self) -> None:
        """Close the client. Safe to call any number of times."""

        if self._client is None:
            logger.debug("disconnect() without an open connection, nothing to do")
            return

        client = self._client
        self._client = None
        self._db = None
        client.close()
        logger.info("disconnected from mongod server {uri}", uri=self.settings.uri)

    async def __aenter__(self) -> "MongoConnection":
        return await self.connect()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
