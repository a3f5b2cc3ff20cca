"""
Pytest configuration and fixtures.
"""
import asyncio
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import pytest

from internal.domain.metrics import OperationMetrics
from internal.domain.product import CreateProductRequest, Product, ProductCategory


FIXED_NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


class InMemoryProductRepository:
    """Product repository fake keeping committed products in a list."""

    def __init__(self, products: Optional[list[Product]] = None) -> None:
        self.products: list[Product] = list(products or [])
        self.pending: list[Product] = []
        self.commit_error: Optional[Exception] = None
        self.commit_gate: Optional[asyncio.Event] = None
        self.commit_started = asyncio.Event()
        self.created_today = 0

    async def sku_exists(self, sku: str) -> bool:
        return any(p.sku == sku for p in self.products)

    async def name_brand_exists(self, name: str, brand: str) -> bool:
        return any(p.name == name and p.brand == brand for p in self.products)

    async def count_created_since(self, since: datetime) -> int:
        return self.created_today + sum(1 for p in self.products if p.created_at >= since)

    async def add(self, product: Product) -> None:
        self.pending.append(product)

    async def commit(self) -> None:
        self.commit_started.set()
        if self.commit_gate is not None:
            await self.commit_gate.wait()
        if self.commit_error is not None:
            self.pending.clear()
            raise self.commit_error
        self.products.extend(self.pending)
        self.pending.clear()


class RecordingSink:
    """Metrics sink that keeps every emitted record."""

    def __init__(self) -> None:
        self.emitted: list[OperationMetrics] = []

    def emit(self, metrics: OperationMetrics) -> None:
        self.emitted.append(metrics)


@pytest.fixture
def fixed_clock():
    """Clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def repository():
    """Empty in-memory product repository."""
    return InMemoryProductRepository()


@pytest.fixture
def sink():
    """Recording metrics sink."""
    return RecordingSink()


@pytest.fixture
def electronics_request():
    """Valid Electronics creation request."""
    return CreateProductRequest(
        name="Smart Watch Pro",
        brand="Acme Devices",
        sku="ACME-SW-001",
        category=ProductCategory.ELECTRONICS,
        price=Decimal("249.99"),
        release_date=date(2025, 1, 10),
        stock_quantity=12,
        image_url="https://cdn.example.com/watch.png",
    )


@pytest.fixture
def home_request():
    """Valid Home creation request."""
    return CreateProductRequest(
        name="Cozy Wool Blanket",
        brand="Nordic Home",
        sku="HOME-00001",
        category="Home",
        price=Decimal("100"),
        release_date=date(2024, 1, 1),
        stock_quantity=10,
        image_url="https://cdn.example.com/blanket.jpg",
    )


@pytest.fixture
def book_request():
    """Valid Books creation request."""
    return CreateProductRequest(
        name="The Pragmatic Gardener",
        brand="Greenleaf Press",
        sku="BOOK-12345",
        category=ProductCategory.BOOKS,
        price=Decimal("24.50"),
        release_date=date(2019, 5, 20),
        stock_quantity=40,
    )


@pytest.fixture
def make_product():
    """Factory for stored products with sensible defaults."""

    def _make(**overrides) -> Product:
        data = {
            "name": "Smart Watch Pro",
            "brand": "Acme Devices",
            "sku": "ACME-SW-001",
            "category": ProductCategory.ELECTRONICS,
            "price": Decimal("249.99"),
            "release_date": date(2025, 1, 10),
            "stock_quantity": 12,
            "is_available": True,
            "image_url": "https://cdn.example.com/watch.png",
            "created_at": FIXED_NOW,
        }
        data.update(overrides)
        return Product(**data)

    return _make
