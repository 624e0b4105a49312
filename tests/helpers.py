"""Shared fixtures: a fresh schema per test and a TestClient bound to it."""

import unittest
from typing import Any

from fastapi.testclient import TestClient

from app.core.database import SessionLocal, engine
from app.main import app
from app.models import Base

API = "/api/v1"

VALID_USER = {"username": "testuser", "email": "test@example.com", "password": "password123"}
ANOTHER_USER = {"username": "anotheruser", "email": "another@example.com", "password": "password123"}
ADMIN_USER = {"username": "admin", "email": "admin@example.com", "password": "password123"}

VALID_POST = {
    "title": "Test Post Title",
    "content": "This is a test post content with enough characters to pass validation.",
}


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them after."""

    def setUp(self) -> None:
        Base.metadata.create_all(bind=engine)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(bind=engine)


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase with a TestClient and register/login helpers."""

    def setUp(self) -> None:
        super().setUp()
        self.client = TestClient(app)

    def register(self, user: dict[str, str] = VALID_USER) -> dict[str, Any]:
        resp = self.client.post(f"{API}/auth/register", json=user)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def make_admin(self, user: dict[str, str] = ADMIN_USER) -> str:
        """Register user, promote it to admin directly in the DB, return its token."""
        from app.models import User

        data = self.register(user)
        self.db.query(User).filter(User.id == data["user"]["id"]).update({"role": "admin"})
        self.db.commit()
        return data["token"]

    @staticmethod
    def auth(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
