"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import auth, health, posts, testing
from app.core.config import settings

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])

if settings.APP_ENV == "test":
    router.include_router(testing.router, prefix="/test", tags=["test"])
