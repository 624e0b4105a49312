"""Tests for app.services.posts against an in-memory SQLite database."""

import time
import unittest
from unittest.mock import MagicMock

from app.core.errors import (
    DuplicateKeyError,
    ForbiddenError,
    MalformedIdentifierError,
    NotFoundError,
    ValidationError,
)
from app.models import Post
from app.schemas.auth import CurrentUser
from app.schemas.post import PostCreate, PostUpdate
from app.services.posts import (
    can_modify,
    create_post,
    delete_post,
    get_post,
    list_posts,
    update_post,
)
from app.services.users import register_user
from tests.helpers import DatabaseTestCase

CONTENT = "This is test post content."


def _settings(default_page_size: int = 10, max_page_size: int = 100) -> MagicMock:
    settings = MagicMock()
    settings.DEFAULT_PAGE_SIZE = default_page_size
    settings.MAX_PAGE_SIZE = max_page_size
    return settings


class PostsTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.author = CurrentUser.model_validate(
            register_user(self.db, "testuser", "test@example.com", "password123")
        )
        self.other = CurrentUser.model_validate(
            register_user(self.db, "anotheruser", "another@example.com", "password123")
        )
        self.admin = CurrentUser.model_validate(
            register_user(self.db, "admin", "admin@example.com", "password123", role="admin")
        )

    def create(self, title: str = "Test Post", **kwargs: object) -> Post:
        return create_post(self.db, PostCreate(title=title, content=CONTENT, **kwargs), self.author)


class TestCreatePost(PostsTestCase):
    def test_creates_with_defaults(self) -> None:
        post = self.create()
        self.assertIsNotNone(post.id)
        self.assertEqual(post.title, "Test Post")
        self.assertEqual(post.author_id, self.author.id)
        self.assertFalse(post.published)
        self.assertEqual(post.tags, [])
        self.assertIsNotNone(post.created_at)
        self.assertIsNotNone(post.updated_at)

    def test_author_populated(self) -> None:
        post = self.create()
        self.assertEqual(post.author.username, "testuser")

    def test_slug_from_title(self) -> None:
        self.assertEqual(self.create("Test Post Title").slug, "test-post-title")

    def test_slug_special_characters(self) -> None:
        self.assertEqual(self.create("Test Post! @#$ Title").slug, "test-post-title")

    def test_slug_multiple_spaces(self) -> None:
        self.assertEqual(self.create("Test    Post    Title").slug, "test-post-title")

    def test_explicit_slug_kept(self) -> None:
        self.assertEqual(self.create(slug="custom-slug").slug, "custom-slug")

    def test_explicit_slug_normalized(self) -> None:
        self.assertEqual(self.create(slug="My Slug/With Spaces!").slug, "my-slug-with-spaces")

    def test_explicit_slugs_collide_after_normalizing(self) -> None:
        self.create("Test Post", slug="Test Post")
        with self.assertRaises(DuplicateKeyError) as ctx:
            self.create("Another Post", slug="test-post")
        self.assertEqual(ctx.exception.field, "slug")

    def test_missing_title_and_content_reported_together(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            create_post(self.db, PostCreate(), self.author)
        self.assertEqual(set(ctx.exception.errors), {"title", "content"})

    def test_duplicate_explicit_slug_rejected(self) -> None:
        self.create("Test Post", slug="test-post")
        with self.assertRaises(DuplicateKeyError) as ctx:
            self.create("Another Post", slug="test-post")
        self.assertEqual(ctx.exception.field, "slug")

    def test_trims_title_and_tags(self) -> None:
        post = self.create("  Test Post  ", tags=["  javascript  ", "  testing  "])
        self.assertEqual(post.title, "Test Post")
        self.assertEqual(post.tags, ["javascript", "testing"])

    def test_category_and_published(self) -> None:
        post = self.create(category=5, published=True)
        self.assertEqual(post.category_id, 5)
        self.assertTrue(post.published)

    def test_validation_before_persisting(self) -> None:
        with self.assertRaises(ValidationError):
            create_post(self.db, PostCreate(title="ab", content="short"), self.author)
        self.assertEqual(self.db.query(Post).count(), 0)


class TestGetPost(PostsTestCase):
    def test_found(self) -> None:
        post = self.create()
        self.assertEqual(get_post(self.db, str(post.id)).id, post.id)

    def test_missing(self) -> None:
        with self.assertRaises(NotFoundError):
            get_post(self.db, "999")

    def test_malformed_id(self) -> None:
        with self.assertRaises(MalformedIdentifierError):
            get_post(self.db, "not-an-id")


class TestListPosts(PostsTestCase):
    def test_newest_first(self) -> None:
        first = self.create("First Post")
        time.sleep(0.01)
        second = self.create("Second Post")
        ids = [p.id for p in list_posts(self.db, _settings())]
        self.assertEqual(ids, [second.id, first.id])

    def test_category_filter(self) -> None:
        self.create("In Category", category=1)
        self.create("Elsewhere", category=2)
        self.create("Uncategorized")
        posts = list_posts(self.db, _settings(), category=1)
        self.assertEqual([p.title for p in posts], ["In Category"])

    def test_pagination(self) -> None:
        for n in range(5):
            self.create(f"Post number {n}")
        page1 = list_posts(self.db, _settings(), page=1, limit=2)
        page3 = list_posts(self.db, _settings(), page=3, limit=2)
        self.assertEqual([p.title for p in page1], ["Post number 4", "Post number 3"])
        self.assertEqual([p.title for p in page3], ["Post number 0"])

    def test_default_and_max_page_size(self) -> None:
        for n in range(4):
            self.create(f"Post number {n}")
        self.assertEqual(len(list_posts(self.db, _settings(default_page_size=3))), 3)
        self.assertEqual(len(list_posts(self.db, _settings(max_page_size=2), limit=50)), 2)


class TestUpdatePost(PostsTestCase):
    def test_author_can_update(self) -> None:
        post = self.create("Original Title")
        updated = update_post(
            self.db, post.id, PostUpdate(title="Updated Title", content=CONTENT), self.author
        )
        self.assertEqual(updated.title, "Updated Title")
        self.assertEqual(updated.slug, "updated-title")

    def test_admin_can_update(self) -> None:
        post = self.create()
        updated = update_post(
            self.db, post.id, PostUpdate(title="Test Post", content="Admin edited content."), self.admin
        )
        self.assertEqual(updated.content, "Admin edited content.")

    def test_other_user_forbidden(self) -> None:
        post = self.create()
        with self.assertRaises(ForbiddenError):
            update_post(self.db, post.id, PostUpdate(title="Hijacked", content=CONTENT), self.other)

    def test_same_title_keeps_slug(self) -> None:
        post = self.create("Test Post", slug="custom-slug")
        updated = update_post(
            self.db, post.id, PostUpdate(title="Test Post", content="Changed content here."), self.author
        )
        self.assertEqual(updated.slug, "custom-slug")

    def test_unsupplied_fields_untouched(self) -> None:
        post = self.create(tags=["python"], category=3, published=True)
        updated = update_post(
            self.db, post.id, PostUpdate(title="Test Post", content=CONTENT), self.author
        )
        self.assertEqual(updated.tags, ["python"])
        self.assertEqual(updated.category_id, 3)
        self.assertTrue(updated.published)

    def test_supplied_fields_applied(self) -> None:
        post = self.create(tags=["python"], category=3)
        updated = update_post(
            self.db,
            post.id,
            PostUpdate(title="Test Post", content=CONTENT, tags=[" a ", "b"], category=None, published=True),
            self.author,
        )
        self.assertEqual(updated.tags, ["a", "b"])
        self.assertIsNone(updated.category_id)
        self.assertTrue(updated.published)

    def test_revalidates(self) -> None:
        post = self.create()
        with self.assertRaises(ValidationError):
            update_post(self.db, post.id, PostUpdate(title="ab", content=CONTENT), self.author)

    def test_updated_at_advances(self) -> None:
        post = self.create("Test Post")
        original = post.updated_at
        time.sleep(0.01)
        updated = update_post(
            self.db, post.id, PostUpdate(title="Updated Title", content=CONTENT), self.author
        )
        self.assertGreater(updated.updated_at, original)

    def test_missing(self) -> None:
        with self.assertRaises(NotFoundError):
            update_post(self.db, 999, PostUpdate(title="Whatever", content=CONTENT), self.author)


class TestDeletePost(PostsTestCase):
    def test_author_can_delete(self) -> None:
        post = self.create()
        delete_post(self.db, post.id, self.author)
        self.assertEqual(self.db.query(Post).count(), 0)

    def test_admin_can_delete(self) -> None:
        post = self.create()
        delete_post(self.db, str(post.id), self.admin)
        self.assertEqual(self.db.query(Post).count(), 0)

    def test_other_user_forbidden(self) -> None:
        post = self.create()
        with self.assertRaises(ForbiddenError):
            delete_post(self.db, post.id, self.other)
        self.assertEqual(self.db.query(Post).count(), 1)


class TestCanModify(unittest.TestCase):
    def test_rules(self) -> None:
        post = Post(author_id=1)
        author = CurrentUser(id=1, username="a", email="a@example.com", role="user")
        stranger = CurrentUser(id=2, username="b", email="b@example.com", role="user")
        admin = CurrentUser(id=3, username="c", email="c@example.com", role="admin")
        self.assertTrue(can_modify(post, author))
        self.assertFalse(can_modify(post, stranger))
        self.assertTrue(can_modify(post, admin))


if __name__ == "__main__":
    unittest.main()
