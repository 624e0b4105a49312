"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """New account details. Length and format rules are enforced by the users service."""

    username: str = Field(default="", description="Username (3-30 characters)")
    email: str = Field(default="", description="Email address")
    password: str = Field(default="", description="Password (6-128 characters)")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; only supplied fields change."""

    username: str | None = None
    email: str | None = None
    password: str | None = None


class UserPublic(BaseModel):
    """User as returned to clients. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    """JWT and the authenticated user, returned by register and login."""

    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    user: UserPublic


class CurrentUser(BaseModel):
    """Authenticated user (id, username, email, role) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str


class UsersListResponse(BaseModel):
    """Response for GET /auth/users (admin only)."""

    users: list[UserPublic]
