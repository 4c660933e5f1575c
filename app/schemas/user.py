"""Request/response schemas for user accounts."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

UserRole = Literal["user", "admin"]

# Min/max lengths for name and password validation.
NAME_MIN_LEN = 1
NAME_MAX_LEN = 100
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


class UserCreate(BaseModel):
    """Fields required to create an account. Role is set only by trusted callers."""

    email: EmailStr = Field(..., description="Unique email address")
    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: UserRole = "user"


class UserUpdate(BaseModel):
    """Profile update; only name and email are mutable."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr | None = None


class UserRead(BaseModel):
    """Safe view of a user. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserRead]
