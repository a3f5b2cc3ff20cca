"""
Product Mapper.

Maps creation requests to Product entities and entities to ProductProfile
views. Profile fields come from a fixed table of pure resolver functions.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

from internal.domain.product import (
    CreateProductRequest,
    Product,
    ProductCategory,
    ProductProfile,
)
from internal.domain.value_objects import normalize_sku


CENT = Decimal("0.01")
HOME_DISCOUNT_FACTOR = Decimal("0.9")

CATEGORY_DISPLAY_NAMES = {
    ProductCategory.ELECTRONICS: "Electronics & Technology",
    ProductCategory.CLOTHING: "Clothing & Fashion",
    ProductCategory.BOOKS: "Books & Media",
    ProductCategory.HOME: "Home & Garden",
}
UNCATEGORIZED = "Uncategorized"

NEW_RELEASE_DAYS = 30
YEAR_DAYS = 365
CLASSIC_DAYS = 1825


@dataclass(frozen=True)
class CurrencyFormat:
    """
    Locale conventions for rendering money.

    Attributes:
        symbol: Currency symbol.
        group_separator: Thousands separator.
        decimal_separator: Separator before the fraction digits.
        symbol_first: Whether the symbol precedes the amount.
    """
    symbol: str
    group_separator: str = ","
    decimal_separator: str = "."
    symbol_first: bool = True

    def format(self, amount: Decimal) -> str:
        """
        Render an amount with exactly two fraction digits.

        Args:
            amount: Amount to render.

        Returns:
            Localized currency string, e.g. "$1,234.50".
        """
        rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
        digits = format(abs(rounded), ",.2f")
        digits = (
            digits.replace(",", "\0")
            .replace(".", self.decimal_separator)
            .replace("\0", self.group_separator)
        )
        sign = "-" if rounded < 0 else ""
        if self.symbol_first:
            return f"{sign}{self.symbol}{digits}"
        return f"{sign}{digits} {self.symbol}"


CURRENCY_FORMATS = {
    "en_US": CurrencyFormat(symbol="$"),
    "en_GB": CurrencyFormat(symbol="£"),
    "de_DE": CurrencyFormat(
        symbol="€", group_separator=".", decimal_separator=",", symbol_first=False
    ),
    "fr_FR": CurrencyFormat(
        symbol="€", group_separator=" ", decimal_separator=",", symbol_first=False
    ),
}
DEFAULT_LOCALE = "en_US"


def currency_format_for(locale_name: str) -> CurrencyFormat:
    """Look up a currency format, falling back to en_US for unknown locales."""
    return CURRENCY_FORMATS.get(locale_name, CURRENCY_FORMATS[DEFAULT_LOCALE])


@dataclass(frozen=True)
class MappingContext:
    """Inputs shared by resolvers that are not part of the entity."""
    now: datetime
    currency: CurrencyFormat


Resolver = Callable[[Product, MappingContext], Any]


def apply_category_price(category: ProductCategory, price: Decimal) -> Decimal:
    """Home products are stored 10% off, rounded half away from zero."""
    if category is ProductCategory.HOME:
        return (price * HOME_DISCOUNT_FACTOR).quantize(CENT, rounding=ROUND_HALF_UP)
    return price


def resolve_category_display_name(product: Product, context: MappingContext) -> str:
    return CATEGORY_DISPLAY_NAMES.get(product.category, UNCATEGORIZED)


def resolve_price(product: Product, context: MappingContext) -> Decimal:
    # Discount was applied when the entity was created.
    return product.price


def resolve_formatted_price(product: Product, context: MappingContext) -> str:
    return context.currency.format(product.price)


def resolve_brand_initials(product: Product, context: MappingContext) -> str:
    parts = (product.brand or "").split()
    if not parts:
        return "?"
    if len(parts) == 1:
        return parts[0][0].upper()
    return parts[0][0].upper() + parts[-1][0].upper()


def resolve_availability_status(product: Product, context: MappingContext) -> str:
    if not product.is_available:
        return "Out of Stock"
    if product.stock_quantity <= 0:
        return "Unavailable"
    if product.stock_quantity == 1:
        return "Last Item"
    if product.stock_quantity <= 5:
        return "Limited Stock"
    return "In Stock"


def resolve_product_age(product: Product, context: MappingContext) -> str:
    """
    Bucket the time since release.

    Anything released 1825 days (five 365-day years) ago or earlier is
    "Classic".
    """
    days = (context.now.date() - product.release_date).days
    if days < 0:
        return "Releases in the future"
    if days < NEW_RELEASE_DAYS:
        return "New Release"
    if days < YEAR_DAYS:
        months = max(1, days // 30)
        return f"{months} month old" if months == 1 else f"{months} months old"
    if days < CLASSIC_DAYS:
        years = max(1, days // YEAR_DAYS)
        return f"{years} year old" if years == 1 else f"{years} years old"
    return "Classic"


def resolve_image_url(product: Product, context: MappingContext) -> Optional[str]:
    if product.category is ProductCategory.HOME:
        return None
    return product.image_url


PROFILE_RESOLVERS: tuple[tuple[str, Resolver], ...] = (
    ("category_display_name", resolve_category_display_name),
    ("price", resolve_price),
    ("formatted_price", resolve_formatted_price),
    ("product_age", resolve_product_age),
    ("brand_initials", resolve_brand_initials),
    ("availability_status", resolve_availability_status),
    ("image_url", resolve_image_url),
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


class ProductMapper:
    """
    Maps between requests, entities and profiles.

    Only id and timestamp generation are impure; both are injectable.
    """

    def __init__(
        self,
        currency: Optional[CurrencyFormat] = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        """
        Initialize the mapper.

        Args:
            currency: Currency format for formatted prices (en_US by default).
            clock: Source of the current aware UTC time.
            id_factory: Generator of new product identifiers.
        """
        self._currency = currency or CURRENCY_FORMATS[DEFAULT_LOCALE]
        self._clock = clock
        self._id_factory = id_factory

    def to_entity(self, request: CreateProductRequest) -> Product:
        """
        Build the Product to persist from a validated request.

        Args:
            request: Request that passed the product rules.

        Returns:
            New Product with generated id and creation timestamp.
        """
        category = ProductCategory.parse(request.category)
        if category is None:
            raise ValueError(f"Unknown product category: {request.category!r}")

        price = request.price if isinstance(request.price, Decimal) else Decimal(str(request.price))

        return Product(
            id=self._id_factory(),
            name=request.name,
            brand=request.brand,
            sku=normalize_sku(request.sku),
            category=category,
            price=apply_category_price(category, price),
            release_date=_to_date(request.release_date),
            stock_quantity=request.stock_quantity,
            is_available=request.stock_quantity > 0,
            image_url=(request.image_url or "").strip() or None,
            created_at=self._clock(),
            updated_at=None,
        )

    def to_output(
        self,
        product: Product,
        now: Optional[datetime] = None,
    ) -> ProductProfile:
        """
        Project a Product into its ProductProfile.

        Args:
            product: Stored product.
            now: Reference time for the age bucket; the mapper clock by default.

        Returns:
            ProductProfile computed from the entity.
        """
        context = MappingContext(now=now or self._clock(), currency=self._currency)
        resolved = {name: resolver(product, context) for name, resolver in PROFILE_RESOLVERS}

        return ProductProfile(
            id=product.id,
            name=product.name,
            brand=product.brand,
            sku=product.sku,
            category=product.category,
            stock_quantity=product.stock_quantity,
            is_available=product.is_available,
            release_date=product.release_date,
            created_at=product.created_at,
            **resolved,
        )
