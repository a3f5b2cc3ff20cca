"""
Value Objects for the Product domain.

Value objects are immutable and defined by their attributes.
"""
import re
from dataclasses import dataclass

from .errors import DomainValidationError


OPERATION_ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
OPERATION_ID_LENGTH = 8

SKU_PATTERN = re.compile(r"^[A-Za-z0-9\-]{5,20}$")


def normalize_sku(raw: str) -> str:
    """Strip every space from a raw SKU."""
    return (raw or "").replace(" ", "")


@dataclass(frozen=True)
class OperationId:
    """
    Operation ID value object used for log correlation.

    Attributes:
        value: Eight upper-case alphanumeric characters.
    """
    value: str

    def __post_init__(self) -> None:
        """Validate operation ID constraints."""
        if len(self.value) != OPERATION_ID_LENGTH:
            raise DomainValidationError(
                f"Operation ID must be {OPERATION_ID_LENGTH} characters"
            )
        if any(ch not in OPERATION_ID_ALPHABET for ch in self.value):
            raise DomainValidationError(
                "Operation ID must contain only A-Z and 0-9"
            )

    @classmethod
    def from_bytes(cls, data: bytes) -> "OperationId":
        """
        Map random bytes onto the operation ID alphabet.

        Args:
            data: At least eight random bytes.

        Returns:
            OperationId built from the first eight bytes.
        """
        if len(data) < OPERATION_ID_LENGTH:
            raise DomainValidationError(
                f"Need {OPERATION_ID_LENGTH} random bytes, got {len(data)}"
            )
        chars = [
            OPERATION_ID_ALPHABET[b % len(OPERATION_ID_ALPHABET)]
            for b in data[:OPERATION_ID_LENGTH]
        ]
        return cls(value="".join(chars))

    def __str__(self) -> str:
        return self.value
