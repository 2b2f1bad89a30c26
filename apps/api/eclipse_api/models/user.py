"""User account record as stored in the ``users`` collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    # pymongo returns naive datetimes unless tz_aware=True
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@dataclass
class UserRecord:
    """A registered person.

    Document keys keep the collection's existing camelCase layout
    (``password``, ``newsletter``, ``lastLogin``).
    """

    email: str
    password_hash: str
    first_name: str
    last_name: str
    company: str | None = None
    agree_terms: bool = False
    newsletter_opt_in: bool = False
    created_at: datetime | None = field(default_factory=_utc_now)
    last_login_at: datetime | None = None
    id: str | None = None

    def to_document(self) -> dict[str, Any]:
        """Serialize for insertion. ``_id`` is left to the server."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "company": self.company,
            "password": self.password_hash,
            "agreeTerms": self.agree_terms,
            "newsletter": self.newsletter_opt_in,
            "createdAt": self.created_at,
            "lastLogin": self.last_login_at,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "UserRecord":
        return cls(
            id=str(document["_id"]) if document.get("_id") is not None else None,
            email=document["email"],
            password_hash=document["password"],
            first_name=document.get("firstName", ""),
            last_name=document.get("lastName", ""),
            company=document.get("company"),
            agree_terms=bool(document.get("agreeTerms", False)),
            newsletter_opt_in=bool(document.get("newsletter", False)),
            created_at=_as_utc(document.get("createdAt")),
            last_login_at=_as_utc(document.get("lastLogin")),
        )

    def __repr__(self) -> str:  # pragma: no cover - debug helper only
        return f"UserRecord(id={self.id!r}, email={self.email!r})"
