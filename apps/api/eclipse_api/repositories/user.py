"""Repository utilities for user persistence."""

from __future__ import annotations

import logging
from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from eclipse_api.core.errors import DuplicateEmailError, StoreUnavailableError
from eclipse_api.models.user import UserRecord

logger = logging.getLogger(__name__)


class UserRepository:
    """Data-access helper for user accounts stored in MongoDB.

    Driver failures are re-raised as ``StoreUnavailableError`` so callers
    never see pymongo exceptions.
    """

    def ensure_indexes(self, collection: Collection) -> None:
        """Create the unique email index backing the uniqueness invariant."""

        try:
            collection.create_index([("email", ASCENDING)], unique=True, name="email_unique")
        except PyMongoError as exc:
            raise StoreUnavailableError("ensure_indexes") from exc

    def get_by_email(self, collection: Collection, email: str) -> UserRecord | None:
        """Return a user matching the supplied email if it exists."""

        try:
            document = collection.find_one({"email": email})
        except PyMongoError as exc:
            raise StoreUnavailableError("find_by_email") from exc
        return UserRecord.from_document(document) if document else None

    def get(self, collection: Collection, identifier: str) -> UserRecord | None:
        """Fetch a user by its ObjectId string; malformed ids match nothing."""

        try:
            object_id = ObjectId(identifier)
        except (InvalidId, TypeError):
            return None

        try:
            document = collection.find_one({"_id": object_id})
        except PyMongoError as exc:
            raise StoreUnavailableError("find_by_id") from exc
        return UserRecord.from_document(document) if document else None

    def add(self, collection: Collection, user: UserRecord) -> UserRecord:
        """Insert a new user and return it with the generated id."""

        try:
            result = collection.insert_one(user.to_document())
        except DuplicateKeyError as exc:
            raise DuplicateEmailError(user.email) from exc
        except PyMongoError as exc:
            raise StoreUnavailableError("insert") from exc

        user.id = str(result.inserted_id)
        return user

    def update_last_login(
        self, collection: Collection, email: str, timestamp: datetime
    ) -> bool:
        """Set ``lastLogin``; returns False when no record matched."""

        try:
            result = collection.update_one({"email": email}, {"$set": {"lastLogin": timestamp}})
        except PyMongoError as exc:
            raise StoreUnavailableError("record_login") from exc
        if result.matched_count == 0:
            logger.debug("No user matched %s while recording login", email)
            return False
        return True
