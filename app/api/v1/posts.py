"""Blog post endpoints. Reads of published posts are public; writes need a token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.errors import ERROR_RESPONSES
from app.api.v1.auth import get_current_identity
from app.core.database import get_db
from app.schemas.auth import IdentityClaim
from app.schemas.post import PostCreate, PostRead, PostUpdate
from app.services.post_service import PostService

router = APIRouter()


def _service(db: Annotated[Session, Depends(get_db)]) -> PostService:
    return PostService(db)


@router.get("", response_model=list[PostRead])
def list_published(
    posts: Annotated[PostService, Depends(_service)],
) -> list[PostRead]:
    """Published posts in creation order."""
    return posts.find_published()


@router.post(
    "",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    responses={k: ERROR_RESPONSES[k] for k in (400, 401, 404, 409)},
)
def create_post(
    body: PostCreate,
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
    posts: Annotated[PostService, Depends(_service)],
) -> PostRead:
    """Create a post owned by the caller. Returns 409 if another post has the same slug."""
    return posts.create(body, author_id=identity.user_id)


@router.get("/mine", response_model=list[PostRead], responses={401: ERROR_RESPONSES[401]})
def list_mine(
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
    posts: Annotated[PostService, Depends(_service)],
) -> list[PostRead]:
    """Drafts and published posts of the caller (dashboard view)."""
    return posts.find_by_author(identity.user_id)


@router.get("/slug/{slug}", response_model=PostRead, responses={404: ERROR_RESPONSES[404]})
def get_post_by_slug(
    slug: str,
    posts: Annotated[PostService, Depends(_service)],
) -> PostRead:
    return posts.find_by_slug(slug)


@router.get("/{post_id}", response_model=PostRead, responses={404: ERROR_RESPONSES[404]})
def get_post(
    post_id: int,
    posts: Annotated[PostService, Depends(_service)],
) -> PostRead:
    return posts.find_by_id(post_id)


@router.patch(
    "/{post_id}",
    response_model=PostRead,
    responses={k: ERROR_RESPONSES[k] for k in (400, 401, 403, 404, 409)},
)
def update_post(
    post_id: int,
    body: PostUpdate,
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
    posts: Annotated[PostService, Depends(_service)],
) -> PostRead:
    """Owner-only partial update; publishing is done by setting published=true."""
    return posts.update(post_id, identity.user_id, body)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={k: ERROR_RESPONSES[k] for k in (401, 403, 404)},
)
def delete_post(
    post_id: int,
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
    posts: Annotated[PostService, Depends(_service)],
) -> Response:
    posts.delete(post_id, identity.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
