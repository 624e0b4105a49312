"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserPublic,
    UsersListResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.post import (
    AuthorSummary,
    DeleteResponse,
    MessageResponse,
    PostCreate,
    PostRead,
    PostUpdate,
)

__all__ = [
    "AuthResponse",
    "AuthorSummary",
    "CurrentUser",
    "DeleteResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PostCreate",
    "PostRead",
    "PostUpdate",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "UserPublic",
    "UsersListResponse",
]
