"""Error body shared by every failing endpoint."""

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body for 4xx/5xx responses: message, stable code, optional field errors."""

    error: str = Field(..., description="Human-readable message")
    code: str | None = Field(default=None, description="Machine-readable error code")
    details: list[FieldError] | None = None
