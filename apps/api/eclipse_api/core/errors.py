"""Domain exceptions shared by the credential store and session issuer."""

from __future__ import annotations

from typing import Any


class EclipseError(Exception):
    """Base exception for account errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(EclipseError):
    """Raised when required input is missing or empty."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message, {"fields": fields or []})


class DuplicateEmailError(EclipseError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str) -> None:
        super().__init__("Email already registered", {"email": email})


class InvalidCredentialsError(EclipseError):
    """Raised for an unknown email or a wrong password.

    Both cases share one message so callers cannot tell which field was wrong.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class InvalidTokenError(EclipseError):
    """Raised when a session token is malformed, tampered with or expired."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__("Invalid or expired token", {"reason": reason})


class StoreUnavailableError(EclipseError):
    """Raised when MongoDB cannot be reached. Safe to retry."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"User store unavailable during {operation}", {"operation": operation}
        )
