"""
Base exception classes shared by every app in the project.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── NotFoundError - A record the caller expected to exist is missing
    └── ExternalServiceError - A third-party service call failed

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError(
        "Subscription record not found",
        details={"stripe_subscription_id": "sub_123"},
    )

    try:
        ...
    except BaseApplicationError as e:
        logger.error("Operation failed", extra=e.to_dict())
        raise
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for the host application
        details: Additional error context (identifiers, vendor codes, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to a serializable dictionary.

        Returns:
            Dict with error, error_code and (when present) details keys
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class NotFoundError(BaseApplicationError):
    """
    Raised when a record that must exist cannot be found.

    Use for single-record lookups where absence indicates a data-integrity
    problem rather than an ordinary empty result.
    """

    default_error_code: str = "NOT_FOUND"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a call to a third-party service fails.

    Subclasses carry the vendor-specific error information in ``details``.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
