"""Lightweight typing helpers shared by Mongo-backed repositories."""

from typing import Any, Callable, Mapping, Union

from motor.motor_asyncio import AsyncIOMotorClient

MongoDocument = Mapping[str, Any]
Number = Union[int, float]

# Builds a client from a URI and keyword options, e.g. ``AsyncIOMotorClient``.
ClientFactory = Callable[..., AsyncIOMotorClient]
