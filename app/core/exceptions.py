"""
Application error taxonomy.

Services raise these; the handlers in ``app.main`` turn them into
``{"error": message}`` responses with the class's status code, and the page
router turns them into flash messages.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    status_code = 400
    error_code = "BUSINESS_ERROR"
    default_message = "Request could not be completed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Missing, invalid or expired session (the caller is unauthenticated)."""
    status_code = 401
    error_code = "AUTH_FAILED"
    default_message = "Could not validate credentials"


class AccessDeniedError(AppException):
    """Authenticated but not allowed. Named to avoid shadowing the builtin PermissionError."""
    status_code = 403
    error_code = "PERMISSION_DENIED"
    default_message = "Access denied"


class NotFoundError(AppException):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class ValidationError(AppException):
    error_code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InvalidStateError(AppException):
    """Illegal workflow transition, e.g. deciding a leave that is no longer pending."""
    error_code = "INVALID_STATE"
    default_message = "Invalid state"


class ConflictError(AppException):
    """Duplicate of a once-per-day action such as check-in."""
    error_code = "CONFLICT"
    default_message = "Conflict"
