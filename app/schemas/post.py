"""Request/response schemas for posts."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Body for POST /posts. Title/content lengths are checked by the posts service."""

    title: str = ""
    content: str = ""
    category: int | None = Field(default=None, description="Category reference id")
    tags: list[str] = Field(default_factory=list)
    published: bool = False
    slug: str | None = Field(default=None, description="Explicit slug; derived from title when omitted")


class PostUpdate(BaseModel):
    """Body for PUT /posts/{id}. Fields other than title/content change only when supplied."""

    title: str = ""
    content: str = ""
    category: int | None = None
    tags: list[str] | None = None
    published: bool | None = None


class AuthorSummary(BaseModel):
    """Populated author: identity fields only."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class PostRead(BaseModel):
    """Post with its author populated."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    slug: str
    category: int | None = Field(
        default=None,
        validation_alias=AliasChoices("category_id", "category"),
    )
    tags: list[str]
    published: bool
    author: AuthorSummary | None
    created_at: datetime
    updated_at: datetime


class DeleteResponse(BaseModel):
    success: bool = True
    message: str


class MessageResponse(BaseModel):
    message: str
