"""Registration, login/logout and auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.errors import ERROR_RESPONSES
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import create_access_token, decode_access_token
from app.schemas.auth import AuthResponse, IdentityClaim, LoginRequest, RegisterRequest
from app.schemas.user import UserCreate, UserRead
from app.services.user_service import UserService

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _issue_session(response: Response, user: UserRead, settings: Settings) -> AuthResponse:
    """Sign a token for user and set it as an httpOnly cookie."""
    token = create_access_token(
        IdentityClaim(user_id=user.id, email=user.email, role=user.role),
        settings,
    )
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.APP_ENV == "prod",
        samesite="lax",
        path="/",
    )
    return AuthResponse(user=user, token=token)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={k: ERROR_RESPONSES[k] for k in (400, 409)},
)
def register(
    body: RegisterRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Create a 'user' account and sign in. Returns 409 if the email is taken."""
    user = UserService(db, settings).create(
        UserCreate(email=body.email, name=body.name, password=body.password)
    )
    return _issue_session(response, user, settings)


@router.post("/login", response_model=AuthResponse, responses={k: ERROR_RESPONSES[k] for k in (400, 401)})
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT and sets the session cookie.
    API clients may send the token as: Authorization: Bearer <token>
    """
    user = UserService(db, settings).authenticate(body.email, body.password)
    return _issue_session(response, UserRead.model_validate(user), settings)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Clear the session cookie. The token itself stays valid until it expires."""
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return response


def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> IdentityClaim:
    """Dependency: verified claim from the Bearer header or, failing that, the cookie."""
    token = credentials.credentials if credentials is not None else None
    if not token:
        token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        raise UnauthorizedError("Authentication required")
    return decode_access_token(token, settings)


def require_admin(
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
) -> IdentityClaim:
    """Dependency: require role 'admin'. Raises 403 for other roles."""
    if identity.role != "admin":
        raise ForbiddenError("Admin access required")
    return identity


@router.get("/me", response_model=IdentityClaim, responses={401: ERROR_RESPONSES[401]})
def me(
    identity: Annotated[IdentityClaim, Depends(get_current_identity)],
) -> IdentityClaim:
    """Return the identity carried by the caller's token."""
    return identity
