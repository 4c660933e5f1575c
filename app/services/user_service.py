"""User accounts: registration, lookup, profile update and deletion."""

import logging
from functools import lru_cache

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.errors import ConflictError, NotFoundError, UnauthorizedError
from app.core.security import hash_password, verify_password
from app.models import User
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.services.persistence import commit_or_conflict

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "Email already registered"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    """Hash checked when the email is unknown so login timing does not reveal it."""
    return hash_password("dummy-password-for-timing", rounds=rounds)


def _safe(user: User) -> UserRead:
    return UserRead.model_validate(user)


class UserService:
    """CRUD for users. Every method returns the safe view except find_by_email."""

    def __init__(self, session: Session, settings: Settings | None = None) -> None:
        self.session = session
        self.settings = settings if settings is not None else get_settings()

    def _get(self, user_id: int, for_update: bool = False) -> User:
        user = self.session.get(User, user_id, with_for_update=for_update)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def find_all(self) -> list[UserRead]:
        users = self.session.query(User).order_by(User.id).all()
        return [_safe(u) for u in users]

    def find_by_id(self, user_id: int) -> UserRead:
        return _safe(self._get(user_id))

    def find_by_email(self, email: str) -> User | None:
        """Internal lookup for the login flow; includes password_hash. None if absent."""
        return self.session.query(User).filter(User.email == email).first()

    def create(self, data: UserCreate) -> UserRead:
        """Register a user. Raises ConflictError if the email is already taken."""
        if self.find_by_email(data.email) is not None:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        user = User(
            email=data.email,
            name=data.name,
            password_hash=hash_password(data.password, rounds=self.settings.BCRYPT_ROUNDS),
            role=data.role,
        )
        self.session.add(user)
        commit_or_conflict(self.session, EMAIL_TAKEN_MESSAGE)
        self.session.refresh(user)
        logger.info("Created user id=%s role=%s", user.id, user.role)
        return _safe(user)

    def authenticate(self, email: str, password: str) -> User:
        """
        Return the user whose credentials match.

        Unknown email and wrong password raise the same UnauthorizedError.
        """
        user = self.find_by_email(email)
        if user is None:
            verify_password(password, _dummy_hash(self.settings.BCRYPT_ROUNDS))
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        if not verify_password(password, user.password_hash):
            logger.info("Failed login for user id=%s", user.id)
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        return user

    def update(self, user_id: int, data: UserUpdate) -> UserRead:
        """Change name and/or email. Raises NotFoundError or ConflictError."""
        user = self._get(user_id, for_update=True)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

        new_email = changes.get("email")
        if new_email is not None and new_email != user.email:
            taken = (
                self.session.query(User.id)
                .filter(User.email == new_email, User.id != user_id)
                .first()
            )
            if taken is not None:
                self.session.rollback()
                raise ConflictError(EMAIL_TAKEN_MESSAGE)

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = func.now()
        commit_or_conflict(self.session, EMAIL_TAKEN_MESSAGE)
        self.session.refresh(user)
        return _safe(user)

    def delete(self, user_id: int) -> None:
        """Delete a user; their posts are removed by the database cascade."""
        user = self._get(user_id, for_update=True)
        self.session.delete(user)
        commit_or_conflict(self.session, "User could not be deleted")
        logger.info("Deleted user id=%s", user_id)
