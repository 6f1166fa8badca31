"""Custom exceptions for the Startup Setu backend."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Exception type → safe user-facing message mapping
_SAFE_MESSAGES: dict[str, str] = {
    "AuthenticationError": "Invalid email or password",
    "ValidationError": "The provided input is invalid. Please check and try again.",
    "ConflictError": "A conflict occurred. Please refresh and try again.",
    "DatabaseError": "A database error occurred. Please try again.",
    "CompletionError": "The assistant is temporarily unavailable. Please try again.",
    "ExternalServiceError": "An external service is temporarily unavailable.",
}

_DEFAULT_MESSAGE = "An error occurred. Please try again."


def sanitize_error(e: Exception) -> str:
    """Map an exception to a safe, user-facing error message.

    The full exception is logged server-side by the caller; only the generic
    message returned here is suitable for HTTP responses. Upstream response
    bodies and database details never leave the process.

    Args:
        e: The exception to sanitize.

    Returns:
        A safe, generic error message string.
    """
    # Walk the MRO to find the most specific matching type
    for cls in type(e).__mro__:
        safe_msg = _SAFE_MESSAGES.get(cls.__name__)
        if safe_msg:
            return safe_msg

    return _DEFAULT_MESSAGE


class SetuException(Exception):
    """Base exception for all Startup Setu errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            status_code: HTTP status code.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    @property
    def public_message(self) -> str:
        """Message safe to return to the caller.

        Client errors carry their own message; server-side failures are
        replaced with a generic one.
        """
        if self.status_code >= 500:
            return sanitize_error(self)
        return self.message


class AuthenticationError(SetuException):
    """Authentication failed error (401)."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(
            message=message,
            code="AUTHENTICATION_ERROR",
            status_code=401,
        )


class ValidationError(SetuException):
    """Input validation error (400).

    Carries every violation found, so callers can report them all at once.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        """Initialize validation error.

        Args:
            message: Error message.
            errors: Individual validation failures.
        """
        self.errors = list(errors) if errors else [message]
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details={"errors": self.errors},
        )

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationError":
        """Build a single error from a list of violations."""
        return cls("; ".join(errors), errors=errors)


class ConflictError(SetuException):
    """Resource conflict error (409)."""

    def __init__(self, message: str, resource: str | None = None) -> None:
        """Initialize conflict error.

        Args:
            message: Error message.
            resource: Name of the conflicting resource.
        """
        details = {}
        if resource:
            details["resource"] = resource
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            details=details,
        )


class DatabaseError(SetuException):
    """Database operation error (500)."""

    def __init__(self, message: str = "A database error occurred") -> None:
        super().__init__(
            message=message,
            code="DATABASE_ERROR",
            status_code=500,
        )


class ExternalServiceError(SetuException):
    """External service error (502)."""

    def __init__(self, service: str, message: str | None = None) -> None:
        """Initialize external service error.

        Args:
            service: Name of the external service.
            message: Optional error message.
        """
        error_message = message or f"Error communicating with {service}"
        super().__init__(
            message=error_message,
            code="EXTERNAL_SERVICE_ERROR",
            status_code=502,
            details={"service": service},
        )


class CompletionError(ExternalServiceError):
    """Language-model API returned a non-success response or was unreachable."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        """Initialize completion error.

        Args:
            message: Upstream error message (logged, never returned to callers).
            upstream_status: HTTP status code reported by the upstream API.
        """
        super().__init__(service="groq", message=message)
        self.code = "COMPLETION_ERROR"
        self.upstream_status = upstream_status
        self.details["upstream_status"] = upstream_status
