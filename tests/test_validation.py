"""Unit tests for app.services.validation."""

import unittest

from app.core.errors import ValidationError
from app.services.validation import (
    clean_tags,
    validate_post_fields,
    validate_profile_fields,
    validate_user_fields,
)


class TestValidateUserFields(unittest.TestCase):
    def test_valid_user_normalized(self) -> None:
        username, email, password, role = validate_user_fields(
            "  testuser  ", "  Test@Example.COM  ", "password123"
        )
        self.assertEqual(username, "testuser")
        self.assertEqual(email, "test@example.com")
        self.assertEqual(password, "password123")
        self.assertEqual(role, "user")

    def test_admin_role_allowed(self) -> None:
        *_, role = validate_user_fields("admin", "admin@example.com", "password123", "admin")
        self.assertEqual(role, "admin")

    def test_unknown_role_rejected(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_user_fields("testuser", "test@example.com", "password123", "superuser")
        self.assertIn("role", ctx.exception.errors)

    def test_username_length_bounds(self) -> None:
        for username in ("ab", "a" * 31, "", None):
            with self.assertRaises(ValidationError) as ctx:
                validate_user_fields(username, "test@example.com", "password123")
            self.assertEqual(list(ctx.exception.errors), ["username"])

    def test_invalid_email(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_user_fields("testuser", "invalid-email", "password123")
        self.assertEqual(ctx.exception.errors["email"], "Please provide a valid email")

    def test_short_password(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_user_fields("testuser", "test@example.com", "12345")
        self.assertEqual(ctx.exception.errors["password"], "Password must be at least 6 characters")

    def test_all_failures_collected_in_field_order(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_user_fields("ab", "nope", None, "root")
        self.assertEqual(list(ctx.exception.errors), ["username", "email", "password", "role"])


class TestValidateProfileFields(unittest.TestCase):
    def test_only_supplied_fields_returned(self) -> None:
        self.assertEqual(validate_profile_fields(email=" New@Example.com "), {"email": "new@example.com"})

    def test_nothing_supplied(self) -> None:
        self.assertEqual(validate_profile_fields(), {})

    def test_bad_password(self) -> None:
        with self.assertRaises(ValidationError):
            validate_profile_fields(password="123")


class TestValidatePostFields(unittest.TestCase):
    def test_trims_title_and_content(self) -> None:
        title, content = validate_post_fields("  Test Post  ", "  This is test post content.  ")
        self.assertEqual(title, "Test Post")
        self.assertEqual(content, "This is test post content.")

    def test_title_bounds(self) -> None:
        for title in ("ab", "a" * 201, "   ab   ", None):
            with self.assertRaises(ValidationError) as ctx:
                validate_post_fields(title, "This is valid content")
            self.assertEqual(
                ctx.exception.errors["title"], "Title must be between 3 and 200 characters"
            )

    def test_title_at_limits_ok(self) -> None:
        validate_post_fields("abc", "This is valid content")
        validate_post_fields("a" * 200, "This is valid content")

    def test_short_content(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_post_fields("Valid Title", "short")
        self.assertEqual(ctx.exception.errors, {"content": "Content must be at least 10 characters"})

    def test_both_invalid(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_post_fields("ab", "short")
        self.assertEqual(list(ctx.exception.errors), ["title", "content"])


class TestCleanTags(unittest.TestCase):
    def test_trims_and_drops_empty(self) -> None:
        self.assertEqual(clean_tags(["  javascript  ", "", "   ", "testing"]), ["javascript", "testing"])

    def test_none_is_empty(self) -> None:
        self.assertEqual(clean_tags(None), [])


if __name__ == "__main__":
    unittest.main()
