"""Field validation for users and posts. All failures are collected into one ValidationError."""

import re

from app.core.errors import ValidationError
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.models.user import ROLES

TITLE_MIN_LEN = 3
TITLE_MAX_LEN = 200
CONTENT_MIN_LEN = 10

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


def _validate_username(username: str | None, errors: dict[str, str]) -> str | None:
    value = (username or "").strip()
    if not (USERNAME_MIN_LEN <= len(value) <= USERNAME_MAX_LEN):
        errors["username"] = (
            f"Username must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN} characters"
        )
        return None
    return value


def _validate_email(email: str | None, errors: dict[str, str]) -> str | None:
    value = (email or "").strip().lower()
    if not value or len(value) > 255 or not EMAIL_PATTERN.match(value):
        errors["email"] = "Please provide a valid email"
        return None
    return value


def _validate_password(password: str | None, errors: dict[str, str]) -> str | None:
    if password is None or len(password) < PASSWORD_MIN_LEN:
        errors["password"] = f"Password must be at least {PASSWORD_MIN_LEN} characters"
        return None
    if len(password) > PASSWORD_MAX_LEN:
        errors["password"] = f"Password must be at most {PASSWORD_MAX_LEN} characters"
        return None
    return password


def validate_user_fields(
    username: str | None,
    email: str | None,
    password: str | None,
    role: str = "user",
) -> tuple[str, str, str, str]:
    """
    Validate registration fields; return (username, email, password, role)
    with username trimmed and email trimmed and lowercased.
    """
    errors: dict[str, str] = {}
    clean_username = _validate_username(username, errors)
    clean_email = _validate_email(email, errors)
    clean_password = _validate_password(password, errors)
    if role not in ROLES:
        errors["role"] = f"Role must be one of: {', '.join(ROLES)}"
    if errors:
        raise ValidationError(errors)
    return clean_username, clean_email, clean_password, role


def validate_profile_fields(
    username: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> dict[str, str]:
    """Validate only the supplied profile fields; return them normalized."""
    errors: dict[str, str] = {}
    changes: dict[str, str | None] = {}
    if username is not None:
        changes["username"] = _validate_username(username, errors)
    if email is not None:
        changes["email"] = _validate_email(email, errors)
    if password is not None:
        changes["password"] = _validate_password(password, errors)
    if errors:
        raise ValidationError(errors)
    return {k: v for k, v in changes.items() if v is not None}


def validate_post_fields(title: str | None, content: str | None) -> tuple[str, str]:
    """Validate and trim post title/content; return (title, content)."""
    errors: dict[str, str] = {}
    clean_title = (title or "").strip()
    clean_content = (content or "").strip()
    if not (TITLE_MIN_LEN <= len(clean_title) <= TITLE_MAX_LEN):
        errors["title"] = f"Title must be between {TITLE_MIN_LEN} and {TITLE_MAX_LEN} characters"
    if len(clean_content) < CONTENT_MIN_LEN:
        errors["content"] = f"Content must be at least {CONTENT_MIN_LEN} characters"
    if errors:
        raise ValidationError(errors)
    return clean_title, clean_content


def clean_tags(tags: list[str] | None) -> list[str]:
    """Trim each tag, drop empty ones, keep order."""
    return [t.strip() for t in (tags or []) if t and t.strip()]
