"""
Closed set of application errors.

Every failure a service reports is one of these. Each carries an HTTP-style
status and a stable machine-readable code; the API layer renders them as
{"error": message, "code": code, "details": [...]}.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for client-side handling."""

    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"


class AppError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code: int = 500
    code: ErrorCode

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code.value}
        if self.details is not None:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class NotFoundError(AppError):
    status_code = 404
    code = ErrorCode.NOT_FOUND

    def __init__(self, resource: str, identifier: str | int | None = None) -> None:
        if identifier is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} with id {identifier} not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class ValidationError(AppError):
    """Structural input failure; details lists {"field", "message"} entries."""

    status_code = 400
    code = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str = "Validation failed",
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message, details)


class UnauthorizedError(AppError):
    status_code = 401
    code = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403
    code = ErrorCode.FORBIDDEN

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409
    code = ErrorCode.CONFLICT
