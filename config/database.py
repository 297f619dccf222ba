# config/database.py
"""Process-wide MongoDB access for the stored registration state."""

from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import quote_plus

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.server_api import ServerApi

from middleware.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "retreat_dashboard"


def _db_name() -> str:
    return os.getenv("DB_NAME", DEFAULT_DB_NAME).strip() or DEFAULT_DB_NAME


def _mongo_uri() -> str:
    """
    Connection string, first match wins:
      TEST_MONGODB_URI, MONGODB_URI, then an Atlas URI assembled from
      DB_USER / DB_PASSWORD / DB_HOST (DB_NAME optional).
    """
    for var in ("TEST_MONGODB_URI", "MONGODB_URI"):
        uri = os.getenv(var)
        if uri:
            return uri

    user = os.getenv("DB_USER", "").strip()
    password = os.getenv("DB_PASSWORD", "").strip()
    host = os.getenv("DB_HOST", "").strip()
    if not (user and password and host):
        raise DatabaseConnectionError(
            "MongoDB is not configured",
            details={"expected": ["TEST_MONGODB_URI", "MONGODB_URI", "DB_USER/DB_PASSWORD/DB_HOST"]},
        )

    return (
        f"mongodb+srv://{user}:{quote_plus(password)}@{host}/{_db_name()}"
        f"?retryWrites=true&w=majority&tls=true"
    )


class MongoConnection:
    """
    Shared MongoClient for the process.

    The client is opened on first use so the app (and its tests) can start
    without a database; routes that touch storage fail with a 503 instead.
    """

    _instance: Optional["MongoConnection"] = None

    def __new__(cls) -> "MongoConnection":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._client = None
        return cls._instance

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            uri = _mongo_uri()
            logger.info("Opening MongoDB client for database %s", _db_name())
            self._client = MongoClient(uri, server_api=ServerApi("1"))
        return self._client

    def db(self) -> Database:
        return self.client[_db_name()]

    def collection(self, name: str) -> Collection:
        return self.db()[name]

    def ping(self) -> bool:
        """Round-trip to the server; raises ``DatabaseConnectionError`` on failure."""
        try:
            self.client.admin.command("ping")
        except DatabaseConnectionError:
            raise
        except Exception as exc:
            raise DatabaseConnectionError(f"MongoDB ping failed: {exc}") from exc
        return True

    def close(self) -> None:
        """Close the client and forget the singleton (tests/shutdown)."""
        if self._client is not None:
            self._client.close()
            self._client = None
        type(self)._instance = None


mongodb = MongoConnection()
