"""
Domain-specific exceptions.

Custom exceptions for domain validation and collaborator failures.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import ValidationOutcome


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize domain error.

        Args:
            message: Error message describing the issue.
        """
        self.message = message
        super().__init__(self.message)


class DomainValidationError(DomainError):
    """Exception raised when a value object invariant is violated."""
    pass


class ProductValidationError(DomainError):
    """Exception raised when a creation request fails the product rules."""

    def __init__(self, outcome: "ValidationOutcome") -> None:
        """
        Initialize product validation error.

        Args:
            outcome: The failed validation outcome.
        """
        super().__init__(outcome.summary())
        self.outcome = outcome


class ProductCreationError(DomainError):
    """Exception raised when product creation fails for a non-input reason."""

    def __init__(self, reason: str, operation_id: str = "") -> None:
        """
        Initialize product creation error.

        Args:
            reason: The underlying failure text.
            operation_id: Operation identifier of the failed attempt.
        """
        super().__init__(f"Product creation failed: {reason}")
        self.reason = reason
        self.operation_id = operation_id


class PersistenceError(DomainError):
    """Exception raised when the product store cannot complete an operation."""
    pass


class CacheError(DomainError):
    """Exception raised when cache operations fail."""
    pass


class MetricsAlreadyEmittedError(DomainError):
    """Exception raised when an operation tries to finish its metrics twice."""

    def __init__(self, operation_id: str) -> None:
        """
        Initialize metrics already emitted error.

        Args:
            operation_id: Operation whose metrics were already built.
        """
        super().__init__(f"Metrics for operation {operation_id} already emitted")
        self.operation_id = operation_id
