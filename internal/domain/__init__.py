"""
Domain package for Product Catalog Service.

Contains domain entities, value objects, validation results and domain errors.
"""
from .product import CreateProductRequest, Product, ProductCategory, ProductProfile
from .metrics import OperationMetrics
from .validation import ValidationFailure, ValidationOutcome
from .value_objects import OperationId, normalize_sku
from .errors import (
    DomainError,
    DomainValidationError,
    ProductValidationError,
    ProductCreationError,
    PersistenceError,
    CacheError,
    MetricsAlreadyEmittedError,
)

__all__ = [
    "CreateProductRequest",
    "Product",
    "ProductCategory",
    "ProductProfile",
    "OperationMetrics",
    "ValidationFailure",
    "ValidationOutcome",
    "OperationId",
    "normalize_sku",
    "DomainError",
    "DomainValidationError",
    "ProductValidationError",
    "ProductCreationError",
    "PersistenceError",
    "CacheError",
    "MetricsAlreadyEmittedError",
]
