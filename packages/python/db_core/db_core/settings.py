"""Configuration helpers for MongoDB connections used by db_core.

Applications create a ``MongoSettings`` instance at startup and hand it to
``MongoConnection``. If no instance is passed, the module level ``settings``
built from the environment is used.
"""
from loguru import logger
import os

from pydantic import BaseModel, Field
from pymongo.uri_parser import parse_uri


class MongoSettings(BaseModel):
    """Basic MongoDB configuration: one URI naming host, port and database."""

    uri: str = Field(
        default_factory=lambda: os.getenv("MONGO_URI", "mongodb://127.0.0.1:27017/mam")
    )
    db_name: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "mam"))
    server_selection_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))
    )

    @property
    def database(self) -> str:
        """Database named in the URI path, falling back to ``db_name``."""

        return parse_uri(self.uri).get("database") or self.db_name


def _default_settings() -> "MongoSettings":
    """Provide a factory to keep settings override logic simple in the future."""

    return MongoSettings()


settings: MongoSettings = _default_settings()
logger.debug(f"MongoSettings initialized with uri={settings.uri} db_name={settings.db_name}")
