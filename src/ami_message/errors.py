"""
Error types for the message codec.

Decoding is best-effort text splitting and never raises for malformed lines,
and looking up an absent field returns None. Errors are reserved for caller
mistakes (wrong input types, unreadable CLI input) and unexpected failures.
"""

from __future__ import annotations

from typing import Any


class MessageError(Exception):
    """
    Base exception class for codec errors.

    Attributes:
        error_code: Internal error code string (e.g., "invalid_argument",
            "internal").
        message: Human-readable error message.
        details: Optional structured details (e.g., offending type, input name).

    Example:
        >>> raise MessageError(
        ...     error_code="invalid_argument",
        ...     message="Cannot decode object of type int",
        ...     details={"type": "int"},
        ... )
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize a MessageError.

        Args:
            error_code: Internal error code string identifying the error category.
            message: Human-readable error message.
            details: Optional dictionary with structured error details.
        """
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        """Return a detailed string representation."""
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code!r}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the error to a dictionary for serialization.

        Returns:
            Dictionary with error_code, message, and details.
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentError(MessageError):
    """
    Error raised when the codec receives input it cannot treat as text.

    This error maps to the "invalid_argument" error code.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize an InvalidArgumentError."""
        super().__init__(
            error_code="invalid_argument", message=message, details=details
        )


class InternalError(MessageError):
    """
    Error raised for unexpected internal errors.

    This error maps to the "internal" error code and should be logged with
    the full stack trace.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize an InternalError."""
        super().__init__(error_code="internal", message=message, details=details)
