"""Database helpers and request-scoped dependencies."""

from fastapi import Depends, Request
from pymongo.collection import Collection

from .mongo import MongoConnection


def get_connection(request: Request) -> MongoConnection:
    """Return the connection handle owned by the running application."""
    return request.app.state.mongo


def get_users_collection(
    connection: MongoConnection = Depends(get_connection),
) -> Collection:
    """Provide the users collection, connecting on first use."""
    return connection.users


__all__ = [
    "MongoConnection",
    "get_connection",
    "get_users_collection",
]
