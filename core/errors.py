"""
Error taxonomy shared by the service layer and the HTTP handlers.
Each error carries the client-facing message and its HTTP status.
"""
from __future__ import annotations


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class InvalidToken(AppError):
    status_code = 400
    default_message = "Invalid or expired token"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class RateLimited(AppError):
    status_code = 429
    default_message = "Too many attempts. Please try again later."

    def __init__(self, message: str | None = None, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class Internal(AppError):
    status_code = 500


__all__ = [
    "AppError",
    "ValidationError",
    "InvalidToken",
    "Unauthorized",
    "NotFound",
    "Conflict",
    "RateLimited",
    "Internal",
]
