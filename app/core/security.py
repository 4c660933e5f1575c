"""Password hashing and JWT creation/verification for authentication."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings, get_settings
from app.core.errors import UnauthorizedError
from app.schemas.auth import IdentityClaim

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of the secret.
BCRYPT_MAX_BYTES = 72

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class InvalidPasswordHashError(ValueError):
    """Stored password hash is not a well-formed bcrypt digest."""


def _settings_or_default(settings: Settings | None) -> Settings:
    return settings if settings is not None else get_settings()


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Each call uses a fresh random salt."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    # Truncate to bcrypt's window; bcrypt>=4.1 raises on longer input.
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    Returns False on mismatch. Raises InvalidPasswordHashError if the stored
    hash is not a bcrypt digest, so a corrupted row never looks like a
    wrong password.
    """
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError) as e:
        logger.error("Malformed password hash rejected: %s", type(e).__name__)
        raise InvalidPasswordHashError("Stored password hash is malformed") from e


def create_access_token(claim: IdentityClaim, settings: Settings | None = None) -> str:
    """Create a signed JWT carrying the identity claim plus iat and exp."""
    settings = _settings_or_default(settings)
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(claim.user_id),
        "email": claim.email,
        "role": claim.role,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings | None = None) -> IdentityClaim:
    """
    Verify signature and expiry and return the identity claim.

    Every failure (bad signature, expired, malformed, missing claims) raises
    the same UnauthorizedError; the concrete reason is only logged.
    """
    settings = _settings_or_default(settings)
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as e:
        logger.debug("Token rejected: %s: %s", type(e).__name__, e)
        raise UnauthorizedError(INVALID_TOKEN_MESSAGE) from e

    try:
        return IdentityClaim(
            user_id=int(payload["sub"]),
            email=payload.get("email"),
            role=payload.get("role"),
        )
    except (TypeError, ValueError, PydanticValidationError) as e:
        logger.debug("Token rejected: invalid claims: %s", e)
        raise UnauthorizedError(INVALID_TOKEN_MESSAGE) from e
