"""Core: configuration, database sessions, error taxonomy and security primitives."""

from app.core.config import get_settings, settings
from app.core.database import SessionLocal, build_engine, get_db
from app.core.errors import (
    AppError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "AppError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "SessionLocal",
    "UnauthorizedError",
    "ValidationError",
    "build_engine",
    "get_db",
    "get_settings",
    "settings",
]
