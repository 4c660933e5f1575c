"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, EmailStr, Field

from app.schemas.user import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    UserRead,
    UserRole,
)


class RegisterRequest(BaseModel):
    """Self-service registration. Always creates a 'user' role account."""

    email: EmailStr = Field(..., description="Email address")
    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Display name")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class IdentityClaim(BaseModel):
    """Verified identity carried by an access token."""

    user_id: int
    email: str
    role: UserRole


class AuthResponse(BaseModel):
    """Returned by register and login; the token is also set as a cookie."""

    user: UserRead
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
