"""
Data Transfer Objects for Product Catalog Service.

Contains Pydantic models that parse raw product payloads. Only types are
checked here; business constraints belong to the product rules.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from internal.domain.product import CreateProductRequest


class CreateProductPayload(BaseModel):
    """Raw product creation payload."""

    name: str = Field("", description="Product name")
    brand: str = Field("", description="Brand name")
    sku: str = Field("", description="Stock-keeping unit")
    category: str = Field("", description="Electronics, Clothing, Books or Home")
    price: Decimal = Field(..., description="Price")
    release_date: date = Field(..., description="Release date (YYYY-MM-DD)")
    stock_quantity: int = Field(0, description="Units in stock")
    image_url: Optional[str] = Field(None, description="Product image URL")

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "name": "Smart Watch Pro",
                "brand": "Acme Devices",
                "sku": "ACME-SW-001",
                "category": "Electronics",
                "price": "249.99",
                "release_date": "2024-03-01",
                "stock_quantity": 12,
                "image_url": "https://cdn.example.com/watch.png",
            }
        }

    def to_request(self) -> CreateProductRequest:
        """Convert to the domain creation request."""
        return CreateProductRequest(
            name=self.name,
            brand=self.brand,
            sku=self.sku,
            category=self.category,
            price=self.price,
            release_date=self.release_date,
            stock_quantity=self.stock_quantity,
            image_url=self.image_url,
        )
