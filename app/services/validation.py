"""Turn raw input into schema objects, reporting failures as ValidationError."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# FastAPI prefixes request errors with where the value came from.
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _field_path(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if len(parts) > 1 and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(str(p) for p in parts) or "__root__"


def field_errors(errors: Iterable[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Convert pydantic/FastAPI error dicts to [{"field", "message"}]."""
    return [
        {"field": _field_path(err.get("loc", ())), "message": str(err.get("msg", "Invalid value"))}
        for err in errors
    ]


def validate_input(schema: type[ModelT], data: Mapping[str, Any] | None) -> ModelT:
    """Validate a mapping against schema; raise ValidationError with field details."""
    try:
        return schema.model_validate(data or {})
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", details=field_errors(e.errors())) from e
