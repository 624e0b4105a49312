"""Registration, login and auth dependencies (get_current_user, authorize, require_admin)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import (
    ForbiddenError,
    MalformedIdentifierError,
    NotAuthorizedError,
    TokenError,
    parse_id,
)
from app.core.security import create_access_token, decode_access_token
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserPublic,
    UsersListResponse,
)
from app.services import users as users_service

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

NOT_AUTHORIZED = "Not authorized to access this route"
USER_NOT_FOUND = "User not found"


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the current user.

    Missing/malformed header, bad or expired token and storage failures all
    raise the same 401; only a verified token for a deleted user says so.
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthorizedError(NOT_AUTHORIZED)
    try:
        payload = decode_access_token(credentials.credentials)
        user_id = parse_id(payload.get("id", payload.get("sub")))
    except (TokenError, MalformedIdentifierError):
        raise NotAuthorizedError(NOT_AUTHORIZED) from None

    try:
        user = users_service.get_user(db, user_id)
    except SQLAlchemyError as e:
        logger.warning("User lookup failed during authentication: %s", e)
        raise NotAuthorizedError(NOT_AUTHORIZED) from e
    if user is None:
        raise NotAuthorizedError(USER_NOT_FOUND)
    return CurrentUser.model_validate(user)


def authorize(*roles: str) -> Callable[[CurrentUser], CurrentUser]:
    """
    Build a dependency that requires an authenticated user whose role is in roles.
    Raises 403 naming the offending role otherwise.
    """
    allowed = frozenset(roles)

    def check_role(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in allowed:
            raise ForbiddenError(
                f"User role '{current_user.role}' is not authorized to access this route"
            )
        return current_user

    return check_role


require_admin = authorize("admin")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create an account and return a JWT for it."""
    user = users_service.register_user(db, body.username, body.email, body.password)
    return AuthResponse(token=create_access_token(user), user=UserPublic.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = users_service.authenticate_user(db, body.email, body.password)
    return AuthResponse(token=create_access_token(user), user=UserPublic.model_validate(user))


@router.get("/me", response_model=UserPublic)
def read_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    user = users_service.get_user(db, current_user.id)
    if user is None:
        raise NotAuthorizedError(USER_NOT_FOUND)
    return UserPublic.model_validate(user)


@router.put("/me", response_model=UserPublic)
def update_me(
    body: ProfileUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    """Update username, email and/or password of the current user."""
    user = users_service.update_profile(
        db,
        current_user.id,
        username=body.username,
        email=body.email,
        password=body.password,
    )
    return UserPublic.model_validate(user)


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    users = users_service.list_users(db)
    return UsersListResponse(users=[UserPublic.model_validate(u) for u in users])
