"""Typed service errors. The HTTP layer maps them to status codes in main.py."""
from typing import Any


class AppError(Exception):
    status_code = 500
    error = "internal_error"

    def __init__(self, message: str = "", details: Any = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.default_message()
        self.details = details

    def default_message(self) -> str:
        return "Internal server error"


class NotFoundError(AppError):
    status_code = 404
    error = "not_found"

    def default_message(self) -> str:
        return "Resource not found"


class UnauthorizedError(AppError):
    status_code = 401
    error = "unauthorized"

    def default_message(self) -> str:
        return "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    error = "forbidden"

    def default_message(self) -> str:
        return "Access denied"


class ValidationError(AppError):
    """Malformed input or a business rule violation (e.g. publishing a hunt without steps)."""

    status_code = 400
    error = "validation_error"

    def __init__(self, message: str = "", errors: list[dict[str, str]] | None = None):
        super().__init__(message, details=errors or [])

    @property
    def errors(self) -> list[dict[str, str]]:
        return self.details

    def default_message(self) -> str:
        return "Validation failed"


class ConflictError(AppError):
    """Optimistic lock lost or session state changed; caller must re-read and retry."""

    status_code = 409
    error = "conflict"

    def default_message(self) -> str:
        return "Resource was modified by another operation"


class ServiceUnavailableError(AppError):
    status_code = 503
    error = "service_unavailable"

    def default_message(self) -> str:
        return "Upstream service unavailable"
