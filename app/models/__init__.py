"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.post import Post
from app.models.user import ROLES, User

__all__ = ["Base", "Post", "ROLES", "User"]
