"""
Logger package.
"""
from .logger import (
    setup_logging,
    get_logger,
    StructuredFormatter,
    StructuredLogger,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "StructuredFormatter",
    "StructuredLogger",
]
