"""
Operation metrics record for product creation attempts.
"""
from dataclasses import dataclass
from typing import Optional


UNKNOWN_CATEGORY = "unknown"


@dataclass(frozen=True)
class OperationMetrics:
    """
    Timing and outcome of one product creation attempt.

    Durations are seconds measured with a monotonic clock.

    Attributes:
        operation_id: Eight-character correlation identifier.
        product_name: Requested product name.
        sku: Requested SKU.
        category: Requested category, or "unknown" when it does not parse.
        validation_duration: Time spent in the product rules.
        persistence_duration: Time spent adding and committing the product.
        total_duration: Wall-clock time of the whole attempt.
        success: Whether the product was created.
        error_reason: Failure text, or a caveat on success.
    """
    operation_id: str
    product_name: str
    sku: str
    category: str
    validation_duration: float
    persistence_duration: float
    total_duration: float
    success: bool
    error_reason: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary representation with millisecond durations."""
        return {
            "operation_id": self.operation_id,
            "product_name": self.product_name,
            "sku": self.sku,
            "category": self.category,
            "validation_ms": round(self.validation_duration * 1000, 3),
            "persistence_ms": round(self.persistence_duration * 1000, 3),
            "total_ms": round(self.total_duration * 1000, 3),
            "success": self.success,
            "error_reason": self.error_reason,
        }
