"""Blog posts: CRUD with slug derivation and owner-only mutation."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.models import Post, User
from app.schemas.post import PostCreate, PostRead, PostUpdate
from app.services.persistence import commit_or_conflict
from app.services.slugs import slugify

logger = logging.getLogger(__name__)

NOT_OWNER_MESSAGE = "Not the post owner"
SLUG_TAKEN_MESSAGE = "A post with this title already exists"

# Columns that cannot be cleared with an explicit null.
_NON_NULLABLE_FIELDS = {"title", "content", "published"}


def _read(post: Post) -> PostRead:
    return PostRead.model_validate(post)


class PostService:
    """
    CRUD for posts.

    update() and delete() load the post first and then compare its author_id
    with the acting user: a missing id is NotFoundError, someone else's post
    is ForbiddenError. The load takes a row lock where the backend supports
    it so the check and the write see the same row.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _get(self, post_id: int, for_update: bool = False) -> Post:
        post = self.session.get(Post, post_id, with_for_update=for_update)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    def _slug_for(self, title: str, exclude_id: int | None = None) -> str:
        slug = slugify(title)
        if not slug:
            raise ValidationError(
                "Validation failed",
                details=[{"field": "title", "message": "Title must contain letters or digits"}],
            )
        query = self.session.query(Post.id).filter(Post.slug == slug)
        if exclude_id is not None:
            query = query.filter(Post.id != exclude_id)
        if query.first() is not None:
            raise ConflictError(SLUG_TAKEN_MESSAGE)
        return slug

    def _ordered(self, *criteria) -> list[PostRead]:
        posts = (
            self.session.query(Post)
            .filter(*criteria)
            .order_by(Post.created_at, Post.id)
            .all()
        )
        return [_read(p) for p in posts]

    def find_published(self) -> list[PostRead]:
        """Published posts in creation order."""
        return self._ordered(Post.published.is_(True))

    def find_by_author(self, author_id: int) -> list[PostRead]:
        """All posts (drafts included) owned by author_id, in creation order."""
        return self._ordered(Post.author_id == author_id)

    def find_by_id(self, post_id: int) -> PostRead:
        return _read(self._get(post_id))

    def find_by_slug(self, slug: str) -> PostRead:
        post = self.session.query(Post).filter(Post.slug == slug).first()
        if post is None:
            raise NotFoundError("Post")
        return _read(post)

    def create(self, data: PostCreate, author_id: int) -> PostRead:
        """Create a post owned by author_id. Raises ConflictError on a duplicate slug."""
        if self.session.get(User, author_id) is None:
            raise NotFoundError("User", author_id)
        post = Post(
            title=data.title,
            slug=self._slug_for(data.title),
            content=data.content,
            excerpt=data.excerpt or None,
            published=data.published,
            author_id=author_id,
        )
        self.session.add(post)
        commit_or_conflict(self.session, SLUG_TAKEN_MESSAGE)
        self.session.refresh(post)
        logger.info("Created post id=%s slug=%s author_id=%s", post.id, post.slug, author_id)
        return _read(post)

    def _owned(self, post_id: int, acting_user_id: int) -> Post:
        post = self._get(post_id, for_update=True)
        owner_id = post.author_id
        if owner_id != acting_user_id:
            self.session.rollback()
            logger.info(
                "Denied user id=%s access to post id=%s owned by id=%s",
                acting_user_id,
                post_id,
                owner_id,
            )
            raise ForbiddenError(NOT_OWNER_MESSAGE)
        return post

    def update(self, post_id: int, acting_user_id: int, data: PostUpdate) -> PostRead:
        """Apply the fields set in data; a new title also produces a new slug."""
        post = self._owned(post_id, acting_user_id)
        changes = {
            k: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k not in _NON_NULLABLE_FIELDS
        }

        if "title" in changes:
            try:
                changes["slug"] = self._slug_for(changes["title"], exclude_id=post.id)
            except (ConflictError, ValidationError):
                self.session.rollback()
                raise
        if "excerpt" in changes:
            changes["excerpt"] = changes["excerpt"] or None

        for field, value in changes.items():
            setattr(post, field, value)
        post.updated_at = func.now()
        commit_or_conflict(self.session, SLUG_TAKEN_MESSAGE)
        self.session.refresh(post)
        return _read(post)

    def delete(self, post_id: int, acting_user_id: int) -> None:
        post = self._owned(post_id, acting_user_id)
        self.session.delete(post)
        commit_or_conflict(self.session, "Post could not be deleted")
        logger.info("Deleted post id=%s by user id=%s", post_id, acting_user_id)
