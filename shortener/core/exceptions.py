"""
Custom Exceptions

This module defines the error taxonomy shared by the stores, the redirect
service and the HTTP layer.

Each exception carries the HTTP status the API answers with, so a single
exception handler in the application maps every failure to a response.
Client errors (validation, auth, moderation) are never logged as faults;
PersistenceError is logged by the exception handler; ExhaustedError is
logged where allocation gives up.
"""

from fastapi import status


class ShortenerException(Exception):
    """Base exception for the URL shortener service."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ShortenerException):
    """Raised when submitted input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(ShortenerException):
    """Raised when the presented bearer credential does not match."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Invalid token!"):
        super().__init__(message)


class ForbiddenError(ShortenerException):
    """Raised when a target exists but is blocked (disabled or blacklisted)."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceDisabledError(ShortenerException):
    """Raised for privileged operations when no secret is configured."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "This endpoint is disabled!"):
        super().__init__(message)


class NotFoundError(ShortenerException):
    """Raised when a referenced redirect does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, redirect_id: str):
        self.redirect_id = redirect_id
        super().__init__(f"ID '{redirect_id}' does not exist!")


class ConflictError(ShortenerException):
    """Raised when a request would violate a moderation rule."""

    status_code = status.HTTP_409_CONFLICT


class PersistenceError(ShortenerException):
    """Raised when a storage write does not affect the expected rows."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


class ExhaustedError(ShortenerException):
    """Raised when no free identifier was found within the attempt bound."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a free ID after {attempts} attempts")
