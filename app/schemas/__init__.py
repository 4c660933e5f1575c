"""Pydantic request/response schemas."""

from app.schemas.auth import AuthResponse, IdentityClaim, LoginRequest, RegisterRequest
from app.schemas.errors import ErrorResponse, FieldError
from app.schemas.health import HealthResponse
from app.schemas.post import PostCreate, PostRead, PostUpdate
from app.schemas.user import UserCreate, UserRead, UserRole, UsersListResponse, UserUpdate

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "FieldError",
    "HealthResponse",
    "IdentityClaim",
    "LoginRequest",
    "PostCreate",
    "PostRead",
    "PostUpdate",
    "RegisterRequest",
    "UserCreate",
    "UserRead",
    "UserRole",
    "UserUpdate",
    "UsersListResponse",
]
