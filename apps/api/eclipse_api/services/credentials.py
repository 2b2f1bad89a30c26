"""Credential store: registration, lookup and last-login bookkeeping."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pymongo.collection import Collection

from eclipse_api.core.config import Settings, get_settings
from eclipse_api.core.errors import DuplicateEmailError, ValidationError
from eclipse_api.core.security import MAX_PASSWORD_BYTES, hash_password
from eclipse_api.models.user import UserRecord
from eclipse_api.repositories.user import UserRepository

logger = logging.getLogger(__name__)


def _bson_now() -> datetime:
    """Current UTC time truncated to BSON's millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class CredentialStore:
    """Durable, email-keyed storage of user identity and password hashes."""

    def __init__(
        self,
        collection: Collection,
        *,
        settings: Settings | None = None,
        repository: UserRepository | None = None,
    ) -> None:
        self._collection = collection
        self._settings = settings or get_settings()
        self._repository = repository or UserRepository()

    def register(
        self,
        *,
        first_name: str | None,
        last_name: str | None,
        email: str | None,
        password: str | None,
        company: str | None = None,
        agree_terms: bool = False,
        newsletter_opt_in: bool = False,
    ) -> UserRecord:
        """Create an account, hashing the password before it is written.

        Raises:
            ValidationError: A required field is missing or empty
            DuplicateEmailError: The email already has an account
            StoreUnavailableError: MongoDB could not be reached
        """
        required = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValidationError("All required fields must be provided", missing)
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes", ["password"]
            )

        if self._repository.get_by_email(self._collection, email) is not None:
            raise DuplicateEmailError(email)

        user = UserRecord(
            email=email,
            password_hash=hash_password(password, rounds=self._settings.password_hash_rounds),
            first_name=first_name,
            last_name=last_name,
            company=company or None,
            agree_terms=bool(agree_terms),
            newsletter_opt_in=bool(newsletter_opt_in),
            created_at=_bson_now(),
        )
        # a concurrent signup that slipped past the lookup hits the unique index
        self._repository.add(self._collection, user)
        logger.info("Registered user %s", email)
        return user

    def find_by_email(self, email: str) -> UserRecord | None:
        return self._repository.get_by_email(self._collection, email)

    def find_by_id(self, user_id: str) -> UserRecord | None:
        return self._repository.get(self._collection, user_id)

    def record_login(self, email: str) -> datetime:
        """Stamp ``lastLogin`` with the current time and return that time.

        An unknown email is ignored; callers have already looked the user up.
        """
        timestamp = _bson_now()
        self._repository.update_last_login(self._collection, email, timestamp)
        return timestamp
