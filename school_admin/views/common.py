"""Common response schemas and request validation helpers."""

from functools import lru_cache
from typing import Any, Iterable, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, create_model
from pydantic import ValidationError as SchemaError

ModelT = TypeVar("ModelT", bound=BaseModel)

_LOCATIONS = {"body", "query", "path", "header"}


class ErrorResponse(BaseModel):
    message: str
    errors: Optional[dict[str, list[str]]] = None


class MessageResponse(BaseModel):
    message: str


class SuccessResponse(BaseModel):
    success: bool = True
    message: str


class PaginationMeta(BaseModel):
    """Enough paging state for a client to rebuild its query string."""

    current_page: int
    last_page: int
    total: int
    per_page: int
    from_: Optional[int] = Field(
        None,
        validation_alias="from",
        serialization_alias="from",
    )
    to: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_meta(cls, meta: dict[str, Any]) -> "PaginationMeta":
        return cls.model_validate(meta)


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic error entries by dotted field name."""

    grouped: dict[str, list[str]] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in _LOCATIONS:
            location = location[1:]
        field = ".".join(location) or "request"
        grouped.setdefault(field, []).append(error.get("msg", "Invalid value."))
    return grouped


@lru_cache(maxsize=None)
def _lenient(model: type[BaseModel]) -> type[BaseModel]:
    # Same validators and config, every field optional.
    fields: dict[str, Any] = {
        name: (Optional[info.annotation], None)
        for name, info in model.model_fields.items()
    }
    return create_model(f"Lenient{model.__name__}", __base__=model, **fields)


def validate_fields(
    model: type[ModelT], data: Mapping[str, Any]
) -> tuple[Optional[ModelT], dict[str, Any], dict[str, list[str]]]:
    """Validate a request body without stopping at the first bad field.

    Returns the parsed model (``None`` when anything failed), the normalised
    values of every field that did parse, and the per-field messages. The
    caller can then run database checks against the usable values and
    report everything in one response.
    """

    try:
        payload = model.model_validate(data)
    except SchemaError as exc:
        errors = field_errors(exc.errors())
    else:
        return payload, payload.model_dump(), {}

    usable = {
        key: value
        for key, value in data.items()
        if key in model.model_fields and key not in errors
    }
    values = _lenient(model).model_validate(usable).model_dump(exclude_unset=True)
    return None, values, errors


__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "PaginationMeta",
    "SuccessResponse",
    "field_errors",
    "validate_fields",
]
