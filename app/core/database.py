"""Database connection, session management and write helpers."""

import logging
import re
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.errors import DuplicateKeyError

logger = logging.getLogger(__name__)

# Driver messages naming the column behind a unique violation.
_UNIQUE_FIELD_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),  # sqlite
    re.compile(r"Key \((\w+)\)=\("),  # postgres
    re.compile(r'unique constraint "(?:ix|uq)_\w+?_(\w+)"'),  # postgres, no detail
)


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory sqlite must share one connection across sessions.
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_kwargs(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def duplicate_key_field(exc: IntegrityError) -> str | None:
    """Return the column named by a unique-index violation, or None for other integrity errors."""
    message = str(exc.orig) if exc.orig is not None else str(exc)
    for pattern in _UNIQUE_FIELD_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


def commit_or_raise(db: Session) -> None:
    """
    Commit the session. Unique-index violations are rolled back and raised as
    DuplicateKeyError; other integrity errors propagate unchanged.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        field = duplicate_key_field(e)
        if field is None:
            raise
        logger.info("Unique constraint rejected write", extra={"field": field})
        raise DuplicateKeyError(field) from e
