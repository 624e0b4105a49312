"""URL slug derivation for posts. Applied explicitly on every post write."""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models import Post

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")

# Used when a title has no ASCII letters or digits at all.
FALLBACK_SLUG = "post"


def slugify(title: str) -> str:
    """Lowercase title and collapse each run of non-alphanumerics into one hyphen."""
    slug = _NON_ALNUM_RUN.sub("-", (title or "").lower()).strip("-")
    return slug or FALLBACK_SLUG


def derive_slug(post: "Post", previous_title: str | None = None) -> "Post":
    """
    Set post.slug from post.title when the post has no slug yet, or when
    previous_title is given and the title has changed since. Returns post.

    An explicitly supplied slug is kept but normalized through slugify, so
    "My Slug/With Spaces!" is stored as "my-slug-with-spaces".
    """
    title_changed = previous_title is not None and post.title != previous_title
    if not post.slug or title_changed:
        post.slug = slugify(post.title)
    else:
        post.slug = slugify(post.slug)
    return post
