"""Pydantic schemas for signup, login and profile payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from eclipse_api.models.user import UserRecord


class CamelModel(BaseModel):
    """Base model exposing camelCase JSON keys for snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupRequest(CamelModel):
    """Registration form submitted by the signup page.

    Required fields are optional here so that missing values surface as a
    400 from the credential store rather than a framework validation error.
    """

    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    company: str | None = Field(default=None, max_length=255)
    password: str | None = None
    agree_terms: bool = False
    newsletter: bool = False


class LoginRequest(CamelModel):
    """Credentials payload submitted to the login endpoint."""

    email: str | None = Field(default=None, max_length=320)
    password: str | None = None


class UserView(CamelModel):
    """Public view of an account; never carries password material."""

    first_name: str
    last_name: str
    email: str
    company: str | None = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserView":
        return cls(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            company=user.company,
        )


class UserProfileView(UserView):
    """Account view returned to the account owner."""

    created_at: datetime | None = None
    last_login_at: datetime | None = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserProfileView":
        return cls(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            company=user.company,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


class SignupResponse(CamelModel):
    success: bool = True
    message: str = "Account created successfully!"
    user: UserView


class LoginResponse(CamelModel):
    success: bool = True
    message: str = "Login successful"
    token: str
    user: UserView


class ProfileResponse(CamelModel):
    success: bool = True
    user: UserProfileView


class ErrorResponse(BaseModel):
    """Body returned for every 4xx/5xx response."""

    success: bool = False
    error: str
