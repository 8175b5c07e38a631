"""
Custom exceptions for UniScout application.

This module defines domain-specific exceptions that can be raised
throughout the application and handled consistently at the API layer.
"""

from typing import Any

from .infrastructure_exceptions import (
    ConfigurationError,
    InfrastructureException,
)


class UniScoutException(Exception):
    """Base exception for all UniScout custom exceptions."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: User-friendly error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class QueryValidationError(UniScoutException):
    """Raised when a degree query fails input validation."""

    def __init__(self, message: str, constraint: str) -> None:
        """
        Initialize QueryValidationError.

        Args:
            message: Human readable description of the failure
            constraint: Name of the failing rule (min_length, max_length, ...)
        """
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"constraint": constraint},
        )
        self.constraint = constraint


class FetchError(UniScoutException):
    """Raised when the search provider is unavailable or fails."""

    def __init__(self, provider: str, reason: str) -> None:
        """
        Initialize FetchError.

        Args:
            provider: Name of the search provider
            reason: Reason for the failure
        """
        super().__init__(
            message=f"Failed to fetch university data from {provider}: {reason}",
            error_code="FETCH_ERROR",
            details={"provider": provider, "reason": reason},
        )
        self.provider = provider
        self.reason = reason


class CacheError(UniScoutException):
    """Raised by the result store; always contained by the cache gateway."""

    def __init__(self, operation: str, reason: str) -> None:
        """
        Initialize CacheError.

        Args:
            operation: The cache operation that failed (read, write, sweep)
            reason: Reason for the failure
        """
        super().__init__(
            message=f"Cache operation '{operation}' failed: {reason}",
            error_code="CACHE_ERROR",
            details={"operation": operation, "reason": reason},
        )
        self.operation = operation


class RateLimitExceededError(UniScoutException):
    """Raised when a client exceeds its request budget."""

    def __init__(self, message: str, retry_after_seconds: float) -> None:
        super().__init__(
            message=message,
            error_code="RATE_LIMIT_EXCEEDED",
            details={"retry_after_seconds": round(retry_after_seconds, 1)},
        )
        self.retry_after_seconds = retry_after_seconds


__all__ = [
    "UniScoutException",
    "QueryValidationError",
    "FetchError",
    "CacheError",
    "RateLimitExceededError",
    "InfrastructureException",
    "ConfigurationError",
]
