"""Current-user profile endpoints and the admin user listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.errors import ERROR_RESPONSES
from app.api.v1.auth import get_current_identity, require_admin
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.schemas.auth import IdentityClaim
from app.schemas.user import UserRead, UsersListResponse, UserUpdate
from app.services.user_service import UserService

router = APIRouter()


def _service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserService:
    return UserService(db, settings)


@router.get("", response_model=UsersListResponse, responses={k: ERROR_RESPONSES[k] for k in (401, 403)})
def list_users(
    _admin: Annotated[IdentityClaim, Depends(require_admin)],
    users: Annotated[UserService, Depends(_service)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=users.find_all())


@router.get("/me", response_model=UserRead, responses={k: ERROR_RESPONSES[k] for k in (401, 404)})
def read_me(
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
    users: Annotated[UserService, Depends(_service)],
) -> UserRead:
    return users.find_by_id(identity.user_id)


@router.patch(
    "/me",
    response_model=UserRead,
    responses={k: ERROR_RESPONSES[k] for k in (400, 401, 404, 409)},
)
def update_me(
    body: UserUpdate,
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
    users: Annotated[UserService, Depends(_service)],
) -> UserRead:
    """
    Update name and/or email. The current token keeps the old email claim
    until the user signs in again.
    """
    return users.update(identity.user_id, body)


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={k: ERROR_RESPONSES[k] for k in (401, 404)},
)
def delete_me(
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
    users: Annotated[UserService, Depends(_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Delete the caller's account and all of their posts."""
    users.delete(identity.user_id)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return response
