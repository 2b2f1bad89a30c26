"""Service layer for account registration and sessions."""

from .credentials import CredentialStore
from .sessions import AuthenticatedSession, SessionIssuer

__all__ = [
    "AuthenticatedSession",
    "CredentialStore",
    "SessionIssuer",
]
