"""
Use case package for Product Catalog Service.

Contains the product rules, the product mapper, creation metrics and the
create product use case.
"""
from .create_product import (
    CreateProductUseCase,
    CreateProductResult,
    InternalFailure,
)
from .creation_metrics import MetricsRecorder, CreationTimer
from .product_mapper import ProductMapper, CurrencyFormat, currency_format_for
from .product_rules import ProductRuleEngine

__all__ = [
    "CreateProductUseCase",
    "CreateProductResult",
    "InternalFailure",
    "MetricsRecorder",
    "CreationTimer",
    "ProductMapper",
    "CurrencyFormat",
    "currency_format_for",
    "ProductRuleEngine",
]
