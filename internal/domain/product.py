"""
Domain model for catalog products.

Contains the creation request, the persisted Product entity and the
ProductProfile presentation view derived from it.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import UUID, uuid4


class ProductCategory(str, Enum):
    """Catalog categories."""

    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    HOME = "Home"

    @classmethod
    def parse(cls, value: object) -> Optional["ProductCategory"]:
        """
        Resolve a raw category value.

        Args:
            value: Enum member or category name (case-insensitive).

        Returns:
            Matching category, or None when the value is not recognized.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        needle = value.strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return None


@dataclass
class CreateProductRequest:
    """
    Untrusted input for creating a product.

    Category is kept as received so that unknown values reach the rules.
    """
    name: str
    brand: str
    sku: str
    category: Union[ProductCategory, str]
    price: Decimal
    release_date: date
    stock_quantity: int
    image_url: Optional[str] = None


@dataclass
class Product:
    """
    Product is the aggregate root for catalog operations.

    Attributes:
        id: Unique identifier of the product.
        name: Display name.
        brand: Brand name.
        sku: Normalized stock-keeping unit.
        category: Product category.
        price: Stored price, already discounted for Home products.
        release_date: Date the product was released.
        stock_quantity: Units in stock.
        is_available: Whether any stock was present at creation.
        image_url: Optional image location.
        created_at: Timestamp of creation.
        updated_at: Timestamp of last update, unset on creation.
    """
    name: str
    brand: str
    sku: str
    category: ProductCategory
    price: Decimal
    release_date: date
    stock_quantity: int = 0
    is_available: bool = False
    image_url: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """
        Convert to dictionary representation.

        Returns:
            Dictionary with all product data.
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "brand": self.brand,
            "sku": self.sku,
            "category": self.category.value,
            "price": str(self.price),
            "release_date": self.release_date.isoformat(),
            "stock_quantity": self.stock_quantity,
            "is_available": self.is_available,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class ProductProfile:
    """
    Read-only presentation view of a Product.

    Recomputed from the entity on every read and never stored.
    """
    id: UUID
    name: str
    brand: str
    sku: str
    category: ProductCategory
    category_display_name: str
    price: Decimal
    formatted_price: str
    product_age: str
    brand_initials: str
    availability_status: str
    stock_quantity: int
    is_available: bool
    release_date: date
    created_at: datetime
    image_url: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": str(self.id),
            "name": self.name,
            "brand": self.brand,
            "sku": self.sku,
            "category": self.category.value,
            "category_display_name": self.category_display_name,
            "price": str(self.price),
            "formatted_price": self.formatted_price,
            "product_age": self.product_age,
            "brand_initials": self.brand_initials,
            "availability_status": self.availability_status,
            "stock_quantity": self.stock_quantity,
            "is_available": self.is_available,
            "release_date": self.release_date.isoformat(),
            "created_at": self.created_at.isoformat(),
            "image_url": self.image_url,
        }
