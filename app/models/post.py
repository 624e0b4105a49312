"""ORM model for blog posts."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.models.base import Base, utc_now


class Post(Base):
    """
    A post owned by exactly one user.

    slug is derived from title on the write path (see app.services.slug).
    category_id references a category by id; categories are managed elsewhere.
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    category_id = Column(Integer, nullable=True, index=True)
    tags = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)
    published = Column(Boolean, nullable=False, default=False)
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    author = relationship("User", back_populates="posts")
