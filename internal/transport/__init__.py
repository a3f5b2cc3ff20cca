"""
Transport package: payload parsing for entry points.
"""
from .dto import CreateProductPayload

__all__ = ["CreateProductPayload"]
