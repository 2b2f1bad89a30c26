"""Security helpers for password hashing and JWT generation."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt

from eclipse_api.core.config import Settings, get_settings
from eclipse_api.core.errors import InvalidTokenError

_TOKEN_ALGORITHM = "HS256"

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(signing_input: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()


def hash_password(password: str, *, rounds: int | None = None) -> str:
    """Hash a password with bcrypt using the configured cost factor."""

    if not password:
        raise ValueError("Password must not be empty")

    cost = rounds if rounds is not None else get_settings().password_hash_rounds
    salt = bcrypt.gensalt(rounds=cost)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, stored_hash: str) -> bool:
    """Validate a password against the stored bcrypt hash.

    Passwords longer than ``MAX_PASSWORD_BYTES`` never match; some bcrypt
    releases would otherwise compare only their first 72 bytes.
    """

    try:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, stored_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    *,
    subject: str,
    settings: Settings | None = None,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Generate a signed JWT for the provided subject."""

    active_settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    expires = now + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=active_settings.jwt_access_token_expires_minutes)
    )

    header = {"alg": _TOKEN_ALGORITHM, "typ": "JWT"}
    payload: dict[str, Any] = {}
    if additional_claims:
        payload.update(additional_claims)
    # registered claims always win over caller supplied ones
    payload.update(
        {
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
        }
    )

    header_segment = _b64encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_segment = _b64encode(
        json.dumps(payload, separators=(",", ":")).encode("utf-8")
    )

    signing_input = f"{header_segment}.{payload_segment}".encode("ascii")
    signature_segment = _b64encode(_sign(signing_input, active_settings.jwt_secret_key))

    return f"{header_segment}.{payload_segment}.{signature_segment}"


def decode_access_token(
    token: str, *, settings: Settings | None = None
) -> dict[str, Any]:
    """Decode and validate a JWT created by ``create_access_token``.

    Raises ``InvalidTokenError`` for malformed, tampered or expired tokens.
    """

    active_settings = settings or get_settings()
    parts = token.split(".")
    if len(parts) != 3:
        raise InvalidTokenError("Token structure invalid")

    header_segment, payload_segment, signature_segment = parts
    try:
        signing_input = f"{header_segment}.{payload_segment}".encode("ascii")
        header = json.loads(_b64decode(header_segment))
        provided_signature = _b64decode(signature_segment)
    except (UnicodeError, binascii.Error, ValueError) as exc:
        raise InvalidTokenError("Token encoding invalid") from exc

    if not isinstance(header, dict) or header.get("alg") != _TOKEN_ALGORITHM:
        raise InvalidTokenError("Token algorithm unsupported")

    expected_signature = _sign(signing_input, active_settings.jwt_secret_key)
    if not hmac.compare_digest(provided_signature, expected_signature):
        raise InvalidTokenError("Token signature mismatch")

    try:
        payload_data = json.loads(_b64decode(payload_segment))
    except (binascii.Error, ValueError) as exc:
        raise InvalidTokenError("Token payload malformed") from exc
    if not isinstance(payload_data, dict):
        raise InvalidTokenError("Token payload malformed")

    exp = payload_data.get("exp")
    if not isinstance(exp, (int, float)):
        raise InvalidTokenError("Token missing expiration")
    now_ts = int(datetime.now(timezone.utc).timestamp())
    if now_ts >= int(exp):
        raise InvalidTokenError("Token expired")

    if not payload_data.get("sub"):
        raise InvalidTokenError("Token missing subject")

    return payload_data
