"""
Custom exception hierarchy for structured error handling.

WHY: Custom exceptions provide:
1. Consistent error handling across the API
2. HTTP status code mapping for FastAPI
3. Structured error responses with contextual data
4. No storage driver messages in client responses

IMPORTANT: Services and DAOs raise these, never bare Exception.
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    All custom exceptions inherit from this class and are turned into JSON
    responses by ``app_exception_handler``.
    """

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        **context: Any,
    ):
        """
        Initialize exception with message and context.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (overrides class default)
            **context: Additional context for debugging (filtered in to_dict)
        """
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for JSON response.

        Returns:
            Dictionary with error details (sensitive fields filtered out)
        """
        sensitive_fields = {"password", "token", "secret", "key", "api_key"}
        filtered_context = {
            k: v for k, v in self.context.items() if k.lower() not in sensitive_fields
        }

        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": filtered_context if filtered_context else None,
        }


# ============================================================================
# Validation & Input Exceptions
# ============================================================================


class ValidationError(AppException):
    """
    Raised when a subscription record or request parameter is invalid.

    The ``field`` context names the offending field so clients can point
    at it.

    HTTP Status: 400 Bad Request
    """

    status_code = 400
    default_message = "Validation failed"


class InvalidRangeError(ValidationError):
    """
    Raised when a billing query range ends before it starts.

    HTTP Status: 400 Bad Request
    """

    default_message = "end_date must be after start_date"


# ============================================================================
# Resource Exceptions
# ============================================================================


class NotFoundError(AppException):
    """
    Raised when a subscription id has no record.

    HTTP Status: 404 Not Found
    """

    status_code = 404
    default_message = "subscription not found"


# ============================================================================
# Storage Exceptions
# ============================================================================


class StorageError(AppException):
    """
    Raised when the persistence layer fails.

    The driver message is kept on ``cause`` for logging; the client only
    sees the generic default message.

    HTTP Status: 500 Internal Server Error
    """

    status_code = 500
    default_message = "internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **context: Any,
    ):
        super().__init__(message, **context)
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Serialize without context so storage internals never reach the client."""
        return {
            "error": self.__class__.__name__,
            "message": self.default_message,
            "status_code": self.status_code,
            "details": None,
        }
