"""Session issuer: password authentication and token verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from eclipse_api.core.config import Settings, get_settings
from eclipse_api.core.errors import InvalidCredentialsError, ValidationError
from eclipse_api.core.security import (
    create_access_token,
    decode_access_token,
    verify_password,
)
from eclipse_api.models.user import UserRecord
from eclipse_api.services.credentials import CredentialStore

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedSession:
    """Signed token plus the account it was issued for."""

    token: str
    user: UserRecord


class SessionIssuer:
    """Authenticates credential pairs and mints bounded-lifetime tokens.

    Tokens are stateless: nothing is stored server side, so a token stays
    valid until ``exp`` even if the account changes afterwards.
    """

    def __init__(
        self,
        store: CredentialStore,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()

    @property
    def token_lifetime(self) -> timedelta:
        return timedelta(minutes=self._settings.jwt_access_token_expires_minutes)

    def authenticate(self, email: str | None, password: str | None) -> AuthenticatedSession:
        """Verify ``email``/``password`` and issue a token.

        Raises:
            ValidationError: Either field is missing or empty
            InvalidCredentialsError: Unknown email or wrong password
            StoreUnavailableError: MongoDB could not be reached
        """
        if not email or not password:
            raise ValidationError(
                "Email and password are required",
                [name for name, value in (("email", email), ("password", password)) if not value],
            )

        user = self._store.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Rejected login for %s", email)
            raise InvalidCredentialsError()

        user.last_login_at = self._store.record_login(email)
        token = create_access_token(
            subject=str(user.id),
            settings=self._settings,
            expires_delta=self.token_lifetime,
            additional_claims={
                "email": user.email,
                "firstName": user.first_name,
                "lastName": user.last_name,
            },
        )
        logger.info("Issued session token for %s", email)
        return AuthenticatedSession(token=token, user=user)

    def verify(self, token: str) -> dict[str, Any]:
        """Return the claims of a valid token.

        Raises:
            InvalidTokenError: Bad signature, malformed or expired token
        """
        return decode_access_token(token, settings=self._settings)
