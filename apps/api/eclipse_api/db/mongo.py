"""MongoDB connection management for the user store."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from eclipse_api.core.config import Settings
from eclipse_api.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., MongoClient]


class MongoConnection:
    """Lazily connected, process-wide MongoDB client handle.

    The first caller of :attr:`client` creates and pings the client; every
    later caller reuses it. Creation happens under a lock so concurrent first
    use still ends up with a single ``MongoClient``.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: ClientFactory = MongoClient,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory
        self._client: MongoClient | None = None
        self._lock = threading.Lock()

    def connect(self) -> MongoClient:
        """Establish the client if needed and return it.

        Raises:
            StoreUnavailableError: If the server cannot be reached
        """
        client = self._client
        if client is not None:
            return client

        with self._lock:
            if self._client is not None:
                return self._client

            try:
                client = self._client_factory(
                    self._settings.mongodb_uri,
                    **self._settings.mongodb_client_options,
                )
                client.admin.command("ping")
            except PyMongoError as exc:
                # exc text may embed the URI; keep it out of the message
                logger.error(
                    "Failed to connect to MongoDB database '%s': %s",
                    self._settings.mongodb_database,
                    type(exc).__name__,
                )
                if client is not None:
                    client.close()
                raise StoreUnavailableError("connect") from exc

            self._client = client
            logger.info(
                "Connected to MongoDB database '%s'", self._settings.mongodb_database
            )
            return client

    def close(self) -> None:
        """Close the client; a later :meth:`connect` opens a new one."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
                logger.info("Disconnected from MongoDB")

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> MongoClient:
        return self.connect()

    @property
    def database(self) -> Database:
        return self.client[self._settings.mongodb_database]

    @property
    def users(self) -> Collection:
        return self.database[self._settings.mongodb_users_collection]

    def list_collection_names(self) -> list[str]:
        """Return collection names, used by the connectivity probe."""
        try:
            return sorted(self.database.list_collection_names())
        except PyMongoError as exc:
            logger.error("Listing MongoDB collections failed: %s", type(exc).__name__)
            raise StoreUnavailableError("list_collections") from exc
