"""Commit helpers that map storage failures onto application errors."""

import logging
import sqlite3

from psycopg2 import errorcodes
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError

logger = logging.getLogger(__name__)

SQLITE_UNIQUE_MESSAGE = "UNIQUE constraint failed"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True if the driver error behind exc is a unique constraint violation."""
    orig = exc.orig
    if getattr(orig, "pgcode", None) == errorcodes.UNIQUE_VIOLATION:
        return True
    return isinstance(orig, sqlite3.IntegrityError) and str(orig).startswith(
        SQLITE_UNIQUE_MESSAGE
    )


def commit_or_conflict(session: Session, conflict_message: str) -> None:
    """
    Commit the session.

    A unique constraint violation becomes ConflictError. Any other storage
    failure (foreign key or check violations, a locked SQLite database) is
    rolled back, logged and re-raised unchanged so the caller sees it as an
    unclassified error.
    """
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if not is_unique_violation(e):
            logger.exception("Constraint violation on commit")
            raise
        logger.info("Unique constraint violation on commit: %s", e.orig)
        raise ConflictError(conflict_message) from e
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Storage failure on commit")
        raise
