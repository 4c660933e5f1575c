"""HTTP tests for /posts: public reads, authenticated writes, ownership enforcement."""

import sqlite3
import unittest
from collections.abc import Generator
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_factory, get_db
from app.main import app
from app.models import Base
from app.services.post_service import PostService

TEST_SETTINGS = Settings(
    _env_file=None,
    APP_ENV="dev",
    DATABASE_URL="sqlite://",
    JWT_SECRET="api-test-secret-0123456789-abcdefghijklmnop",
    BCRYPT_ROUNDS=4,
)
PREFIX = f"{TEST_SETTINGS.API_V1_PREFIX}/posts"


class PostsApiTestCase(unittest.TestCase):
    """Two registered users; requests authenticate with explicit Bearer headers."""

    def setUp(self) -> None:
        engine = build_engine("sqlite://")
        Base.metadata.create_all(engine)
        session_factory = build_session_factory(engine)

        def override_get_db() -> Generator[Session, None, None]:
            db = session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: TEST_SETTINGS
        self.client = TestClient(app)
        self.owner = self._register("owner@example.com")
        self.other = self._register("other@example.com")

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def _register(self, email: str) -> dict[str, str]:
        resp = self.client.post(
            f"{TEST_SETTINGS.API_V1_PREFIX}/auth/register",
            json={"email": email, "name": email.split("@")[0], "password": "password123"},
        )
        self.assertEqual(resp.status_code, 201)
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    def _create(self, title: str = "Hello World", headers: dict[str, str] | None = None, **fields):
        resp = self.client.post(
            PREFIX,
            json={"title": title, "content": "Body", **fields},
            headers=headers or self.owner,
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()


class TestCreatePost(PostsApiTestCase):
    def test_create(self) -> None:
        post = self._create("Hello & World! 2024")
        self.assertEqual(post["slug"], "hello-world-2024")
        self.assertFalse(post["published"])

    def test_create_requires_auth(self) -> None:
        resp = self.client.post(PREFIX, json={"title": "T", "content": "C"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "UNAUTHORIZED")

    def test_create_with_garbage_token(self) -> None:
        resp = self.client.post(
            PREFIX,
            json={"title": "T", "content": "C"},
            headers={"Authorization": "Bearer not-a-token"},
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "Invalid or expired token")

    def test_create_validation(self) -> None:
        resp = self.client.post(PREFIX, json={"title": ""}, headers=self.owner)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual({d["field"] for d in resp.json()["details"]}, {"title", "content"})

    def test_create_duplicate_slug(self) -> None:
        self._create("Hello World")
        resp = self.client.post(
            PREFIX, json={"title": "Hello, World", "content": "C"}, headers=self.other
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["code"], "CONFLICT")


class TestReadPosts(PostsApiTestCase):
    def test_list_published_only(self) -> None:
        self._create("Public", published=True)
        self._create("Secret Draft")
        resp = self.client.get(PREFIX)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([p["title"] for p in resp.json()], ["Public"])

    def test_mine_includes_drafts(self) -> None:
        self._create("Public", published=True)
        self._create("Secret Draft")
        self._create("Theirs", headers=self.other)
        resp = self.client.get(f"{PREFIX}/mine", headers=self.owner)
        self.assertEqual([p["title"] for p in resp.json()], ["Public", "Secret Draft"])

    def test_get_by_id_and_slug(self) -> None:
        post = self._create("Slug Test")
        self.assertEqual(self.client.get(f"{PREFIX}/{post['id']}").json()["slug"], "slug-test")
        self.assertEqual(self.client.get(f"{PREFIX}/slug/slug-test").json()["id"], post["id"])

    def test_missing(self) -> None:
        resp = self.client.get(f"{PREFIX}/999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Post with id 999 not found", "code": "NOT_FOUND"})
        self.assertEqual(self.client.get(f"{PREFIX}/slug/nope").status_code, 404)

    def test_non_integer_id(self) -> None:
        resp = self.client.get(f"{PREFIX}/abc")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["details"][0]["field"], "post_id")


class TestUpdatePost(PostsApiTestCase):
    def test_owner_update(self) -> None:
        post = self._create("Original")
        resp = self.client.patch(
            f"{PREFIX}/{post['id']}", json={"title": "New", "published": True}, headers=self.owner
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["slug"], "new")
        self.assertTrue(resp.json()["published"])

    def test_non_owner_forbidden(self) -> None:
        post = self._create("Mine")
        resp = self.client.patch(f"{PREFIX}/{post['id']}", json={"title": "Hack"}, headers=self.other)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "Not the post owner", "code": "FORBIDDEN"})

    def test_missing(self) -> None:
        resp = self.client.patch(f"{PREFIX}/999", json={"title": "X"}, headers=self.other)
        self.assertEqual(resp.status_code, 404)

    def test_cannot_change_author(self) -> None:
        post = self._create("Mine")
        resp = self.client.patch(f"{PREFIX}/{post['id']}", json={"author_id": 2}, headers=self.owner)
        self.assertEqual(resp.status_code, 400)


class TestDeletePost(PostsApiTestCase):
    def test_owner_delete(self) -> None:
        post = self._create("Delete Me")
        resp = self.client.delete(f"{PREFIX}/{post['id']}", headers=self.owner)
        self.assertEqual(resp.status_code, 204)
        self.assertEqual(self.client.get(f"{PREFIX}/{post['id']}").status_code, 404)

    def test_non_owner_forbidden(self) -> None:
        post = self._create("Keep Me")
        resp = self.client.delete(f"{PREFIX}/{post['id']}", headers=self.other)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.client.get(f"{PREFIX}/{post['id']}").status_code, 200)

    def test_requires_auth(self) -> None:
        post = self._create("Keep Me")
        self.assertEqual(self.client.delete(f"{PREFIX}/{post['id']}").status_code, 401)

    def test_missing(self) -> None:
        self.assertEqual(self.client.delete(f"{PREFIX}/999", headers=self.owner).status_code, 404)


class TestAccountDeletionCascade(PostsApiTestCase):
    def test_posts_removed_with_author(self) -> None:
        post = self._create("Gone Soon", published=True)
        self.assertEqual(
            self.client.delete(f"{TEST_SETTINGS.API_V1_PREFIX}/users/me", headers=self.owner).status_code,
            204,
        )
        self.assertEqual(self.client.get(f"{PREFIX}/{post['id']}").status_code, 404)
        self.assertEqual(self.client.get(PREFIX).json(), [])


class TestStorageFailures(PostsApiTestCase):
    def test_locked_database_is_503(self) -> None:
        locked = OperationalError("SELECT", {}, sqlite3.OperationalError("database is locked"))
        with patch.object(PostService, "find_published", side_effect=locked):
            resp = self.client.get(PREFIX)
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json(), {"error": "Service temporarily unavailable"})
        self.assertEqual(resp.headers["Retry-After"], "1")

    def test_unexpected_error_hides_detail(self) -> None:
        client = TestClient(app, raise_server_exceptions=False)
        with patch.object(PostService, "find_published", side_effect=RuntimeError("secret detail")):
            resp = client.get(PREFIX)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal server error"})
        self.assertNotIn("secret detail", resp.text)


if __name__ == "__main__":
    unittest.main()
