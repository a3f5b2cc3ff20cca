"""
Validation result types.

Rule failures are collected as values, never raised.
"""
from dataclasses import dataclass, field
from typing import Iterable, Tuple


@dataclass(frozen=True)
class ValidationFailure:
    """
    A single field-scoped rule failure.

    Attributes:
        field: Name of the request field the failure belongs to.
        message: Human readable failure text.
    """
    field: str
    message: str

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Aggregated result of the product rules.

    An empty failure tuple means the request is valid.
    """
    failures: Tuple[ValidationFailure, ...] = field(default_factory=tuple)

    @classmethod
    def from_failures(cls, failures: Iterable[ValidationFailure]) -> "ValidationOutcome":
        """
        Build an outcome keeping first-seen order and dropping exact duplicates.

        Args:
            failures: Failures in discovery order.

        Returns:
            ValidationOutcome with unique failures.
        """
        seen = set()
        unique = []
        for failure in failures:
            if failure in seen:
                continue
            seen.add(failure)
            unique.append(failure)
        return cls(failures=tuple(unique))

    @property
    def is_valid(self) -> bool:
        return not self.failures

    def for_field(self, field_name: str) -> list[str]:
        """Messages reported for one field."""
        return [f.message for f in self.failures if f.field == field_name]

    def messages(self) -> list[str]:
        return [f.message for f in self.failures]

    def summary(self) -> str:
        """Single-line description used as a metrics error reason."""
        if self.is_valid:
            return ""
        return "; ".join(self.messages())

    def to_dict(self) -> dict:
        """Group messages by field."""
        grouped: dict[str, list[str]] = {}
        for failure in self.failures:
            grouped.setdefault(failure.field, []).append(failure.message)
        return grouped
