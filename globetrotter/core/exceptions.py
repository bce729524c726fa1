"""
Custom exceptions for the GlobeTrotter backend.

Services raise these at the point of detection; the boundary handler in
``error_handlers`` turns them into an HTTP status and a JSON envelope.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class GlobeTrotterException(Exception):
    """Base exception for the GlobeTrotter backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class BadRequestError(GlobeTrotterException):
    """Raised for missing or invalid, caller-correctable input."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.BAD_REQUEST,
            details=details,
            status_code=400
        )


class UnauthorizedError(GlobeTrotterException):
    """Raised when no session is present or credentials are wrong."""

    def __init__(self, message: str = "Login to continue!"):
        super().__init__(
            message=message,
            error_code=ErrorCode.UNAUTHORIZED,
            status_code=401
        )


class ForbiddenError(GlobeTrotterException):
    """Raised when the session's role is not allowed for the operation."""

    def __init__(self, message: str = "You are not authorised to access this!"):
        super().__init__(
            message=message,
            error_code=ErrorCode.FORBIDDEN,
            status_code=403
        )


class NotFoundError(GlobeTrotterException):
    """
    Raised when an entity is absent or not owned by the caller.

    Both cases share this error so callers cannot discover other users' ids.
    """

    def __init__(self, message: str = "Not found"):
        super().__init__(
            message=message,
            error_code=ErrorCode.NOT_FOUND,
            status_code=404
        )


class ConflictError(GlobeTrotterException):
    """Raised on uniqueness violations (duplicate email/phone, scheduling rules)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.CONFLICT,
            details=details,
            status_code=409
        )


class InternalError(GlobeTrotterException):
    """Raised when a dependency fails in a way the caller cannot correct."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(
            message=message,
            error_code=ErrorCode.INTERNAL_SERVER_ERROR,
            status_code=500
        )
