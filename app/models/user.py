"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import deferred, relationship

from app.models.base import Base, utc_now

ROLES = ("user", "admin")


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'. password_hash is deferred: default reads never
    load it; undefer(User.password_hash) when a credential check needs it.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(30), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = deferred(Column(String(255), nullable=False))
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    posts = relationship("Post", back_populates="author", passive_deletes=True)
