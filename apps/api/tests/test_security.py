"""Unit tests for core security helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from datetime import timedelta

import pytest

from eclipse_api.core.config import Settings, get_settings
from eclipse_api.core.errors import InvalidTokenError
from eclipse_api.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def _segment(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def test_hash_password_is_salted_and_verifiable() -> None:
    first = hash_password("secret", rounds=4)
    second = hash_password("secret", rounds=4)

    assert first != "secret"
    assert first != second
    assert first.startswith("$2b$04$")
    assert verify_password("secret", first)
    assert verify_password("secret", second)
    assert not verify_password("Secret", first)


@pytest.mark.parametrize("password", ["a", "pässwörd", "with spaces ", "x" * 72])
def test_verify_password_accepts_original_password(password: str) -> None:
    assert verify_password(password, hash_password(password, rounds=4))


def test_hash_password_uses_configured_rounds() -> None:
    settings = get_settings()

    hashed = hash_password("secret")

    assert hashed.startswith(f"$2b${settings.password_hash_rounds:02d}$")


def test_hash_password_rejects_empty_password() -> None:
    with pytest.raises(ValueError, match="Password must not be empty"):
        hash_password("")


def test_verify_password_rejects_garbage_hash() -> None:
    assert verify_password("secret", "not-a-bcrypt-hash") is False


def test_verify_password_rejects_input_past_bcrypt_limit() -> None:
    hashed = hash_password("x" * 72, rounds=4)

    assert verify_password("x" * 72 + "y", hashed) is False


def test_decode_access_token_returns_payload() -> None:
    settings = get_settings()
    token = create_access_token(
        subject="42",
        settings=settings,
        expires_delta=timedelta(minutes=5),
        additional_claims={"email": "a@x.com"},
    )

    payload = decode_access_token(token, settings=settings)

    assert payload["sub"] == "42"
    assert payload["email"] == "a@x.com"
    assert payload["exp"] > payload["iat"]


def test_additional_claims_cannot_override_registered_claims() -> None:
    settings = get_settings()
    token = create_access_token(
        subject="42",
        settings=settings,
        additional_claims={"sub": "1", "exp": 1},
    )

    payload = decode_access_token(token, settings=settings)

    assert payload["sub"] == "42"


def test_default_lifetime_is_one_day() -> None:
    settings = get_settings()
    token = create_access_token(subject="42", settings=settings)

    payload = decode_access_token(token, settings=settings)

    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_decode_access_token_rejects_tampered_signature() -> None:
    settings = get_settings()
    token = create_access_token(subject="42", settings=settings, expires_delta=timedelta(minutes=5))

    header_segment, payload_segment, signature_segment = token.split(".")
    tampered_payload = payload_segment[:-1] + ("a" if payload_segment[-1] != "a" else "b")
    tampered = ".".join([header_segment, tampered_payload, signature_segment])

    with pytest.raises(InvalidTokenError) as exc_info:
        decode_access_token(tampered, settings=settings)
    assert exc_info.value.reason == "Token signature mismatch"


def test_decode_access_token_rejects_expired_token() -> None:
    settings = get_settings()
    token = create_access_token(subject="42", settings=settings, expires_delta=timedelta(seconds=-1))

    with pytest.raises(InvalidTokenError) as exc_info:
        decode_access_token(token, settings=settings)
    assert exc_info.value.reason == "Token expired"


def test_decode_access_token_rejects_foreign_secret() -> None:
    other = Settings(
        mongodb_uri="mongodb://localhost:27017",
        jwt_secret_key="a-completely-different-key",
    )
    token = create_access_token(subject="42", settings=other)

    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings=get_settings())


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "!!!.???.***"])
def test_decode_access_token_rejects_malformed_tokens(token: str) -> None:
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings=get_settings())


def test_decode_access_token_rejects_unsigned_algorithm() -> None:
    header = _segment({"alg": "none", "typ": "JWT"})
    payload = _segment({"sub": "42", "exp": 4102444800})

    with pytest.raises(InvalidTokenError) as exc_info:
        decode_access_token(f"{header}.{payload}.", settings=get_settings())
    assert exc_info.value.reason == "Token algorithm unsupported"


def test_decode_access_token_requires_expiration() -> None:
    settings = get_settings()
    header = _segment({"alg": "HS256", "typ": "JWT"})
    payload = _segment({"sub": "42"})
    # signed with the real key so only the missing claim is at fault
    signature = hmac.new(
        settings.jwt_secret_key.encode("utf-8"),
        f"{header}.{payload}".encode("ascii"),
        hashlib.sha256,
    ).digest()
    signature_segment = base64.urlsafe_b64encode(signature).rstrip(b"=").decode("ascii")

    with pytest.raises(InvalidTokenError) as exc_info:
        decode_access_token(f"{header}.{payload}.{signature_segment}", settings=settings)
    assert exc_info.value.reason == "Token missing expiration"
