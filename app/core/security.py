"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings
from app.core.errors import ExpiredTokenError, InvalidSubjectError, InvalidTokenError

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 30
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# bcrypt only uses the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash. Missing or malformed hashes never match."""
    if not hashed or plain_password is None:
        return False
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user: Any,
    expires_delta: timedelta | None = None,
    secret: str | None = None,
) -> str:
    """
    Create a JWT access token for user with sub/id/email, iat and exp.
    Raises InvalidSubjectError if user is None or lacks an id or email.
    """
    user_id = getattr(user, "id", None) if user is not None else None
    email = getattr(user, "email", None) if user is not None else None
    if user_id in (None, "") or not email:
        raise InvalidSubjectError("Cannot issue a token for a user without id and email")

    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "id": user_id,
        "email": email,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(
        payload,
        secret or settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, secret: str | None = None) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, id, email, iat, exp).
    Raises ExpiredTokenError for an expired token and InvalidTokenError for
    any other failure. Both are TokenError.
    """
    try:
        return jwt.decode(
            token,
            secret or settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredTokenError(str(e) or "Signature has expired") from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError(str(e) or "Invalid token") from e
