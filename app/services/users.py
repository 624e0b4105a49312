"""User accounts: registration, credential checks and profile changes."""

import logging

from sqlalchemy.orm import Session, undefer

from app.core.database import commit_or_raise
from app.core.errors import NotAuthorizedError, NotFoundError
from app.core.security import hash_password, verify_password
from app.models import User
from app.services.validation import validate_profile_fields, validate_user_fields

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def register_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: str = "user",
) -> User:
    """
    Validate and create a user, storing only the bcrypt hash of password.
    Raises ValidationError or DuplicateKeyError (username/email taken).
    """
    username, email, password, role = validate_user_fields(username, email, password, role)
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    commit_or_raise(db)
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "role": user.role})
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Return the user matching email and password; raise NotAuthorizedError otherwise."""
    normalized = (email or "").strip().lower()
    user = (
        db.query(User)
        .options(undefer(User.password_hash))
        .filter(User.email == normalized)
        .first()
    )
    if user is None or not verify_password(password or "", user.password_hash):
        raise NotAuthorizedError(INVALID_CREDENTIALS)
    return user


def get_user(db: Session, user_id: int) -> User | None:
    """Load a user by id. The password hash is not loaded."""
    return db.query(User).filter(User.id == user_id).first()


def update_profile(
    db: Session,
    user_id: int,
    username: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> User:
    """
    Apply supplied profile fields. The password is re-hashed only when a new
    one is supplied; other changes leave the stored hash untouched.
    """
    changes = validate_profile_fields(username=username, email=email, password=password)
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if "username" in changes:
        user.username = changes["username"]
    if "email" in changes:
        user.email = changes["email"]
    if "password" in changes:
        user.password_hash = hash_password(changes["password"])
    commit_or_raise(db)
    db.refresh(user)
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()
