"""Seed/clear endpoints for end-to-end test runs. Mounted only when APP_ENV is test."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models import Post, User
from app.schemas.auth import CurrentUser
from app.schemas.post import MessageResponse, PostCreate
from app.services.posts import create_post
from app.services.users import register_user

router = APIRouter()

SEED_PASSWORD = "password123"


@router.post("/seed", response_model=MessageResponse)
def seed(db: Annotated[Session, Depends(get_db)]) -> MessageResponse:
    """Create two users with one post each."""
    for n in (1, 2):
        user = register_user(db, f"testuser{n}", f"test{n}@example.com", SEED_PASSWORD)
        create_post(
            db,
            PostCreate(title=f"Test Post {n}", content=f"This is test post content {n}"),
            CurrentUser.model_validate(user),
        )
    return MessageResponse(message="Database seeded successfully")


@router.post("/clear", response_model=MessageResponse)
def clear(db: Annotated[Session, Depends(get_db)]) -> MessageResponse:
    db.query(Post).delete(synchronize_session=False)
    db.query(User).delete(synchronize_session=False)
    db.commit()
    return MessageResponse(message="Database cleared successfully")
