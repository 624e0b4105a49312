"""Post CRUD with author-or-admin ownership checks."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session, joinedload

from app.core.database import commit_or_raise
from app.core.errors import ForbiddenError, NotFoundError, parse_id
from app.models import Post
from app.schemas.auth import CurrentUser
from app.schemas.post import PostCreate, PostUpdate
from app.services.slug import derive_slug
from app.services.validation import clean_tags, validate_post_fields

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found"


def can_modify(post: Post, user: CurrentUser) -> bool:
    """Only the author or an admin may change or delete a post."""
    return post.author_id == user.id or user.role == "admin"


def list_posts(
    db: Session,
    settings: "Settings",
    category: int | None = None,
    page: int = 1,
    limit: int | None = None,
) -> list[Post]:
    """Return one page of posts, newest first, with authors populated."""
    limit = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    page = max(page, 1)
    query = db.query(Post).options(joinedload(Post.author))
    if category is not None:
        query = query.filter(Post.category_id == category)
    return (
        query.order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def get_post(db: Session, post_id: str | int) -> Post:
    """Load a post with its author; raise NotFoundError if absent."""
    pk = parse_id(post_id)
    post = db.query(Post).options(joinedload(Post.author)).filter(Post.id == pk).first()
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)
    return post


def create_post(db: Session, body: PostCreate, user: CurrentUser) -> Post:
    """Validate, derive the slug and persist a post authored by user."""
    title, content = validate_post_fields(body.title, body.content)
    post = Post(
        title=title,
        content=content,
        slug=(body.slug or "").strip() or None,
        category_id=body.category,
        tags=clean_tags(body.tags),
        published=body.published,
        author_id=user.id,
    )
    derive_slug(post)
    db.add(post)
    commit_or_raise(db)
    logger.info("Post created", extra={"post_id": post.id, "author_id": user.id})
    return get_post(db, post.id)


def update_post(db: Session, post_id: str | int, body: PostUpdate, user: CurrentUser) -> Post:
    """
    Update a post the user owns (or any post, for admins). Title and content
    are re-validated; other fields change only when supplied. The slug is
    re-derived when the title changes.
    """
    post = get_post(db, post_id)
    if not can_modify(post, user):
        raise ForbiddenError("Not authorized to update this post")

    title, content = validate_post_fields(body.title, body.content)
    previous_title = post.title
    post.title = title
    post.content = content
    supplied = body.model_fields_set
    if "category" in supplied:
        post.category_id = body.category
    if "tags" in supplied:
        post.tags = clean_tags(body.tags)
    if "published" in supplied and body.published is not None:
        post.published = body.published
    derive_slug(post, previous_title=previous_title)
    commit_or_raise(db)
    return get_post(db, post.id)


def delete_post(db: Session, post_id: str | int, user: CurrentUser) -> None:
    post = get_post(db, post_id)
    if not can_modify(post, user):
        raise ForbiddenError("Not authorized to delete this post")
    pk = post.id
    db.delete(post)
    db.commit()
    logger.info("Post deleted", extra={"post_id": pk, "deleted_by": user.id})
