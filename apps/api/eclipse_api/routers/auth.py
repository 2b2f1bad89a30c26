"""Signup, login and profile endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.collection import Collection

from eclipse_api.core.config import get_settings
from eclipse_api.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    ValidationError,
)
from eclipse_api.db import get_users_collection
from eclipse_api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    SignupRequest,
    SignupResponse,
    UserProfileView,
    UserView,
)
from eclipse_api.services import CredentialStore, SessionIssuer

router = APIRouter(tags=["Auth"])
_bearer_scheme = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_credential_store(
    collection: Collection = Depends(get_users_collection),
) -> CredentialStore:
    return CredentialStore(collection, settings=get_settings())


def get_session_issuer(
    store: CredentialStore = Depends(get_credential_store),
) -> SessionIssuer:
    return SessionIssuer(store, settings=get_settings())


@router.post("/signup", response_model=SignupResponse)
def signup(
    payload: SignupRequest,
    store: CredentialStore = Depends(get_credential_store),
) -> SignupResponse:
    """Register a new account."""

    try:
        user = store.register(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            company=payload.company,
            password=payload.password,
            agree_terms=payload.agree_terms,
            newsletter_opt_in=payload.newsletter,
        )
    except (ValidationError, DuplicateEmailError) as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc

    return SignupResponse(user=UserView.from_record(user))


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> LoginResponse:
    """Authenticate a user and return a signed session token."""

    try:
        session = issuer.authenticate(payload.email, payload.password)
    except ValidationError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    except InvalidCredentialsError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=exc.message) from exc

    return LoginResponse(token=session.token, user=UserView.from_record(session.user))


@router.get("/profile", response_model=ProfileResponse)
def read_profile(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    issuer: SessionIssuer = Depends(get_session_issuer),
    store: CredentialStore = Depends(get_credential_store),
) -> ProfileResponse:
    """Return the account behind the presented bearer token."""

    if credentials is None:
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = issuer.verify(credentials.credentials)
    except InvalidTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc.reason)
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    user = store.find_by_id(str(claims["sub"]))
    if user is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="User not found")

    return ProfileResponse(user=UserProfileView.from_record(user))
