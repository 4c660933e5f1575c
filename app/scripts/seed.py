"""
Seed a development database with two accounts and three posts. Run from project root:
  python -m app.scripts.seed

Creates missing tables first, so it also works on a fresh SQLite file without
running Alembic. Records that already exist are left untouched.
"""

import logging
import sys

from sqlalchemy.orm import Session

from app.core.database import SessionLocal, engine
from app.core.errors import ConflictError
from app.models import Base
from app.schemas.post import PostCreate
from app.schemas.user import UserCreate
from app.services.post_service import PostService
from app.services.user_service import UserService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

SEED_PASSWORD = "password123"

SEED_USERS = [
    UserCreate(email="admin@example.com", name="Admin User", password=SEED_PASSWORD, role="admin"),
    UserCreate(email="user@example.com", name="Regular User", password=SEED_PASSWORD, role="user"),
]

# (author email, post)
SEED_POSTS = [
    (
        "admin@example.com",
        PostCreate(
            title="Getting Started with FastAPI",
            content=(
                "FastAPI is a web framework for building APIs with Python type hints. "
                "Request bodies are validated by Pydantic and documented automatically."
            ),
            excerpt="Learn the basics of routing, dependencies and schemas.",
            published=True,
        ),
    ),
    (
        "admin@example.com",
        PostCreate(
            title="Understanding SQLAlchemy Sessions",
            content=(
                "A Session tracks the objects you load and flushes your changes "
                "to the database in a single transaction when you commit."
            ),
            excerpt="Deep dive into the unit of work pattern.",
            published=True,
        ),
    ),
    (
        "user@example.com",
        PostCreate(
            title="Draft: Advanced Patterns",
            content="This is a draft post about advanced API patterns.",
            published=False,
        ),
    ),
]


def seed(db: Session) -> tuple[int, int]:
    """Insert seed records that are missing. Returns (users_created, posts_created)."""
    users = UserService(db)
    posts = PostService(db)
    users_created = posts_created = 0

    for data in SEED_USERS:
        try:
            users.create(data)
            users_created += 1
        except ConflictError:
            logger.info("Seed user %s already exists; skipping", data.email)

    for author_email, data in SEED_POSTS:
        author = users.find_by_email(author_email)
        if author is None:
            continue
        try:
            posts.create(data, author_id=author.id)
            posts_created += 1
        except ConflictError:
            logger.info("Seed post %r already exists; skipping", data.title)

    return users_created, posts_created


def main() -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        users_created, posts_created = seed(db)
        logger.info("Seed complete: users_created=%s posts_created=%s", users_created, posts_created)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
