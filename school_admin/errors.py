"""Domain error taxonomy translated to HTTP responses in ``main``."""

from __future__ import annotations

from typing import Mapping, Sequence


class AppError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code = 500
    message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(AppError):
    """Missing, malformed or duplicate input, reported per field."""

    status_code = 422
    message = "The given data was invalid."

    def __init__(
        self,
        errors: Mapping[str, Sequence[str]],
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = {field: list(messages) for field, messages in errors.items()}

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})


class NotFoundError(AppError):
    status_code = 404
    message = "Resource not found."


class ForbiddenError(AppError):
    status_code = 403
    message = "This action is unauthorized."


class ConflictError(AppError):
    """A uniqueness constraint rejected the write at the data-store level.

    Rendered with the same body as ``ValidationError`` so clients only have
    one error shape to handle.
    """

    status_code = 422
    message = "The given data was invalid."

    def __init__(self, field: str, detail: str) -> None:
        super().__init__()
        self.field = field
        self.detail = detail

    @property
    def errors(self) -> dict[str, list[str]]:
        return {self.field: [self.detail]}


class UnexpectedError(AppError):
    """Any other failure; details are logged, never returned."""

    status_code = 500
    message = "The request could not be completed."


__all__ = [
    "AppError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "UnexpectedError",
    "ValidationError",
]
