"""Post endpoints: public reads, authenticated writes with ownership checks."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.config import get_settings
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.post import DeleteResponse, PostCreate, PostRead, PostUpdate
from app.services import posts as posts_service

router = APIRouter()


@router.get("", response_model=list[PostRead])
def list_posts(
    db: Annotated[Session, Depends(get_db)],
    category: Annotated[int | None, Query(description="Category reference id")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> list[PostRead]:
    """List posts newest first, optionally filtered by category, one page at a time."""
    posts = posts_service.list_posts(
        db, get_settings(), category=category, page=page, limit=limit
    )
    return [PostRead.model_validate(p) for p in posts]


@router.get("/{post_id}", response_model=PostRead)
def get_post(
    post_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> PostRead:
    return PostRead.model_validate(posts_service.get_post(db, post_id))


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
def create_post(
    body: PostCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostRead:
    """Create a post authored by the current user. The slug is derived from the title unless given."""
    return PostRead.model_validate(posts_service.create_post(db, body, user))


@router.put("/{post_id}", response_model=PostRead)
def update_post(
    post_id: str,
    body: PostUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostRead:
    """Update a post. Only its author or an admin may do so."""
    return PostRead.model_validate(posts_service.update_post(db, post_id, body, user))


@router.delete("/{post_id}", response_model=DeleteResponse)
def delete_post(
    post_id: str,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> DeleteResponse:
    posts_service.delete_post(db, post_id, user)
    return DeleteResponse(success=True, message="Post deleted")
