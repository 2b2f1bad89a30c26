"""Pydantic schemas used by the FastAPI application."""

from .auth import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    SignupRequest,
    SignupResponse,
    UserProfileView,
    UserView,
)
from .health import DatabaseCheckResponse, StatusResponse

__all__ = [
    # Auth schemas
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "ProfileResponse",
    "SignupRequest",
    "SignupResponse",
    "UserProfileView",
    "UserView",
    # Health schemas
    "DatabaseCheckResponse",
    "StatusResponse",
]
