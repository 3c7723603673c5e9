"""
Application error hierarchy.

Every error kind carries a fixed HTTP status code. Routers and services raise
these; backend.app.error_handlers turns them into the standard response
envelope.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors reported to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    """Missing resource. Also used for resources the caller may not see."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class UnprocessableError(AppError):
    status_code = 422
    default_message = "Unprocessable entity"


class TooManyRequestsError(AppError):
    status_code = 429
    default_message = "Too many requests"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"


__all__ = [
    "AppError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableError",
    "TooManyRequestsError",
    "InternalError",
]
