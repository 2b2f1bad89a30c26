"""Shared fixtures: required settings and an in-memory users collection."""

from __future__ import annotations

import os

# Settings are read at import time of eclipse_api.main; these must be set first.
os.environ.setdefault("ECLIPSE_MONGODB_URI", "mongodb://localhost:27017/?directConnection=true")
os.environ.setdefault("ECLIPSE_JWT_SECRET_KEY", "test-signing-key-for-pytest")
os.environ.setdefault("ECLIPSE_PASSWORD_HASH_ROUNDS", "4")

from collections.abc import Iterator  # noqa: E402

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from pymongo.collection import Collection  # noqa: E402

from eclipse_api.core.config import Settings, get_settings  # noqa: E402
from eclipse_api.db import get_users_collection  # noqa: E402
from eclipse_api.main import app  # noqa: E402
from eclipse_api.repositories.user import UserRepository  # noqa: E402
from eclipse_api.services import CredentialStore, SessionIssuer  # noqa: E402


@pytest.fixture()
def settings() -> Settings:
    return get_settings()


@pytest.fixture()
def users_collection() -> Collection:
    collection = mongomock.MongoClient()["eclipse_ai"]["users"]
    UserRepository().ensure_indexes(collection)
    return collection


@pytest.fixture()
def store(users_collection: Collection, settings: Settings) -> CredentialStore:
    return CredentialStore(users_collection, settings=settings)


@pytest.fixture()
def issuer(store: CredentialStore, settings: Settings) -> SessionIssuer:
    return SessionIssuer(store, settings=settings)


@pytest.fixture()
def client(users_collection: Collection) -> Iterator[TestClient]:
    app.dependency_overrides[get_users_collection] = lambda: users_collection
    yield TestClient(app)
    app.dependency_overrides.pop(get_users_collection, None)
