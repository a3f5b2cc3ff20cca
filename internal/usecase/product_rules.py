"""
Product Rule Engine.

Validates product creation requests in four stages:

1. Per-field structural rules. Each field owns an ordered chain that stops
   at its first failure; failures of different fields are all kept.
2. Category rules, appended to a field only when it passed stage 1.
3. Uniqueness lookups against the product store (SKU, name + brand).
4. Aggregate business rules: daily creation cap and price/stock coupling.

Bad input is reported as a ValidationOutcome. Store errors propagate.
"""
import asyncio
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Protocol
from urllib.parse import urlparse

from internal.domain.product import CreateProductRequest, ProductCategory
from internal.domain.validation import ValidationFailure, ValidationOutcome
from internal.domain.value_objects import SKU_PATTERN, normalize_sku
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


DAILY_CREATION_LIMIT = 500

MIN_PRICE = Decimal("0")
MAX_PRICE = Decimal("10000")
PRICE_QUANTUM = Decimal("0.01")
MAX_STOCK = 100_000
MIN_RELEASE_YEAR = 1900

ELECTRONICS_MIN_PRICE = Decimal("50")
ELECTRONICS_MAX_AGE_YEARS = 5
HOME_MAX_PRICE = Decimal("200")
CLOTHING_MIN_BRAND_LENGTH = 3

EXPENSIVE_PRICE = Decimal("100")
EXPENSIVE_MAX_STOCK = 20

BLOCKED_NAME_WORDS = ("badword1", "badword2")
TECHNOLOGY_KEYWORDS = (
    "smart", "pro", "ultra", "4k", "hd", "wifi",
    "bluetooth", "gaming", "pc", "laptop", "tablet",
)
HOME_RESTRICTED_WORDS = ("weapon", "explosive")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")

BRAND_PATTERN = re.compile(r"^(?:[^\W_]|[\s\-.'’])+$")

MSG_ELECTRONICS_PRICE = "Electronics must have a minimum price of $50.00."
MSG_HOME_NAME = "Home product name contains inappropriate words."
MSG_EXPENSIVE_STOCK = "Expensive products (>$100) must have limited stock (≤20 units)."


class ProductLookup(Protocol):
    """Read operations the rules need from the product store."""

    async def sku_exists(self, sku: str) -> bool:
        """Check whether a product with this SKU exists."""
        ...

    async def name_brand_exists(self, name: str, brand: str) -> bool:
        """Check whether a product with this name and brand exists."""
        ...

    async def count_created_since(self, since: datetime) -> int:
        """Count products created at or after the given instant."""
        ...


@dataclass(frozen=True)
class RuleContext:
    """Values shared by every rule of one validation run."""
    now: datetime
    category: Optional[ProductCategory]

    @property
    def today(self) -> date:
        return self.now.date()


@dataclass(frozen=True)
class Rule:
    """A predicate over the request and the message reported when it fails."""
    check: Callable[[CreateProductRequest, RuleContext], bool]
    message: str


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


def _contains_any(text: str, words: tuple[str, ...]) -> bool:
    lower = text.lower()
    return any(word in lower for word in words)


def _as_decimal(value: object) -> Optional[Decimal]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        result = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def _as_date(value: object) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def _as_int(value: object) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year - years, day=28)


# Structural checks

def _name_present(r: CreateProductRequest, c: RuleContext) -> bool:
    return bool(_text(r.name).strip())


def _name_length(r: CreateProductRequest, c: RuleContext) -> bool:
    return 1 <= len(_text(r.name)) <= 200


def _name_clean(r: CreateProductRequest, c: RuleContext) -> bool:
    return not _contains_any(_text(r.name), BLOCKED_NAME_WORDS)


def _brand_present(r: CreateProductRequest, c: RuleContext) -> bool:
    return bool(_text(r.brand).strip())


def _brand_length(r: CreateProductRequest, c: RuleContext) -> bool:
    return 2 <= len(_text(r.brand)) <= 100


def _brand_characters(r: CreateProductRequest, c: RuleContext) -> bool:
    return bool(BRAND_PATTERN.match(_text(r.brand)))


def _sku_present(r: CreateProductRequest, c: RuleContext) -> bool:
    return bool(_text(r.sku).strip())


def _sku_format(r: CreateProductRequest, c: RuleContext) -> bool:
    return bool(SKU_PATTERN.match(normalize_sku(_text(r.sku))))


def _category_known(r: CreateProductRequest, c: RuleContext) -> bool:
    return c.category is not None


def _price_present(r: CreateProductRequest, c: RuleContext) -> bool:
    return _as_decimal(r.price) is not None


def _price_range(r: CreateProductRequest, c: RuleContext) -> bool:
    return MIN_PRICE < _as_decimal(r.price) < MAX_PRICE


def _price_precision(r: CreateProductRequest, c: RuleContext) -> bool:
    price = _as_decimal(r.price)
    return price == price.quantize(PRICE_QUANTUM)


def _release_date_present(r: CreateProductRequest, c: RuleContext) -> bool:
    return _as_date(r.release_date) is not None


def _release_date_not_future(r: CreateProductRequest, c: RuleContext) -> bool:
    return _as_date(r.release_date) <= c.today


def _release_date_year(r: CreateProductRequest, c: RuleContext) -> bool:
    return _as_date(r.release_date).year >= MIN_RELEASE_YEAR


def _stock_present(r: CreateProductRequest, c: RuleContext) -> bool:
    return _as_int(r.stock_quantity) is not None


def _stock_range(r: CreateProductRequest, c: RuleContext) -> bool:
    return 0 <= r.stock_quantity <= MAX_STOCK


def _image_url_valid(r: CreateProductRequest, c: RuleContext) -> bool:
    url = _text(r.image_url).strip()
    if not url:
        return True
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    return parsed.path.lower().endswith(IMAGE_EXTENSIONS)


# Category checks

def _electronics_price(r: CreateProductRequest, c: RuleContext) -> bool:
    return _as_decimal(r.price) >= ELECTRONICS_MIN_PRICE


def _electronics_keyword(r: CreateProductRequest, c: RuleContext) -> bool:
    return _contains_any(_text(r.name), TECHNOLOGY_KEYWORDS)


def _electronics_recent(r: CreateProductRequest, c: RuleContext) -> bool:
    return _as_date(r.release_date) >= _years_before(c.today, ELECTRONICS_MAX_AGE_YEARS)


def _home_price(r: CreateProductRequest, c: RuleContext) -> bool:
    return _as_decimal(r.price) <= HOME_MAX_PRICE


def _home_name(r: CreateProductRequest, c: RuleContext) -> bool:
    return not _contains_any(_text(r.name), HOME_RESTRICTED_WORDS)


def _clothing_brand(r: CreateProductRequest, c: RuleContext) -> bool:
    return len(_text(r.brand)) >= CLOTHING_MIN_BRAND_LENGTH


FIELD_RULES: dict[str, tuple[Rule, ...]] = {
    "name": (
        Rule(_name_present, "Product name is required."),
        Rule(_name_length, "Product name must be between 1 and 200 characters."),
        Rule(_name_clean, "Product name contains inappropriate content."),
    ),
    "brand": (
        Rule(_brand_present, "Brand is required."),
        Rule(_brand_length, "Brand must be between 2 and 100 characters."),
        Rule(_brand_characters, "Brand contains invalid characters."),
    ),
    "sku": (
        Rule(_sku_present, "SKU is required."),
        Rule(_sku_format, "SKU must be alphanumeric with hyphens and 5-20 characters."),
    ),
    "category": (
        Rule(_category_known, "Category must be a valid value."),
    ),
    "price": (
        Rule(_price_present, "Price is required."),
        Rule(_price_range, "Price must be greater than 0 and less than 10000."),
        Rule(_price_precision, "Price must have at most 2 decimal places."),
    ),
    "release_date": (
        Rule(_release_date_present, "Release date is required."),
        Rule(_release_date_not_future, "Release date cannot be in the future."),
        Rule(_release_date_year, "Release date cannot be before year 1900."),
    ),
    "stock_quantity": (
        Rule(_stock_present, "Stock quantity is required."),
        Rule(_stock_range, "Stock quantity must be between 0 and 100000."),
    ),
    "image_url": (
        Rule(_image_url_valid, "Image URL must be a valid HTTP/HTTPS image URL."),
    ),
}

CATEGORY_RULES: dict[ProductCategory, dict[str, tuple[Rule, ...]]] = {
    ProductCategory.ELECTRONICS: {
        "price": (Rule(_electronics_price, MSG_ELECTRONICS_PRICE),),
        "name": (
            Rule(
                _electronics_keyword,
                "Electronics products must contain technology-related keywords in the name.",
            ),
        ),
        "release_date": (
            Rule(
                _electronics_recent,
                "Electronics products must be released within the last 5 years.",
            ),
        ),
    },
    ProductCategory.HOME: {
        "price": (Rule(_home_price, "Home products must not exceed $200.00."),),
        "name": (Rule(_home_name, MSG_HOME_NAME),),
    },
    ProductCategory.CLOTHING: {
        "brand": (
            Rule(_clothing_brand, "Clothing brand must be at least 3 characters."),
        ),
    },
}


class ProductRuleEngine:
    """
    Rule engine for product creation requests.

    Holds no per-request state; one instance can validate concurrent requests.
    """

    def __init__(
        self,
        lookup: ProductLookup,
        daily_limit: int = DAILY_CREATION_LIMIT,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize the rule engine.

        Args:
            lookup: Product store used for uniqueness and count checks.
            daily_limit: Maximum products accepted per UTC day.
            clock: Source of the current aware UTC time.
        """
        self._lookup = lookup
        self._daily_limit = daily_limit
        self._clock = clock

    async def validate(
        self,
        request: CreateProductRequest,
        operation_id: Optional[str] = None,
    ) -> ValidationOutcome:
        """
        Validate a creation request.

        Args:
            request: Untrusted creation request.
            operation_id: Operation identifier for log correlation.

        Returns:
            Aggregated ValidationOutcome of all stages.
        """
        context = RuleContext(
            now=self._clock(),
            category=ProductCategory.parse(request.category),
        )

        failures, structurally_valid = self._check_fields(request, context, FIELD_RULES)

        category_rules = CATEGORY_RULES.get(context.category, {})
        category_failures, _ = self._check_fields(
            request,
            context,
            {f: rules for f, rules in category_rules.items() if f in structurally_valid},
        )
        failures.extend(category_failures)
        valid = structurally_valid - {f.field for f in category_failures}

        failures.extend(await self._check_uniqueness(request, valid))
        failures.extend(
            await self._check_business_rules(request, context, structurally_valid)
        )

        outcome = ValidationOutcome.from_failures(failures)
        if not outcome.is_valid:
            logger.debug(
                "Product rules rejected request",
                operation_id=operation_id,
                failures=[f.to_dict() for f in outcome.failures],
            )
        return outcome

    def _check_fields(
        self,
        request: CreateProductRequest,
        context: RuleContext,
        chains: dict[str, tuple[Rule, ...]],
    ) -> tuple[list[ValidationFailure], set[str]]:
        """Run each field chain up to its first failure."""
        failures = []
        passed = set()
        for field_name, rules in chains.items():
            failed = next((rule for rule in rules if not rule.check(request, context)), None)
            if failed is None:
                passed.add(field_name)
            else:
                failures.append(ValidationFailure(field_name, failed.message))
        return failures, passed

    async def _check_uniqueness(
        self,
        request: CreateProductRequest,
        valid: set[str],
    ) -> list[ValidationFailure]:
        """Query the store for SKU and name + brand collisions."""
        checks = []
        if "sku" in valid:
            checks.append(self._check_sku_unique(normalize_sku(request.sku)))
        if {"name", "brand"} <= valid:
            checks.append(self._check_name_brand_unique(request.name, request.brand))

        tasks = [asyncio.ensure_future(check) for check in checks]
        try:
            results = await asyncio.gather(*tasks)
        except Exception:
            # A failed lookup must not leave its sibling running.
            for task in tasks:
                task.cancel()
            raise
        return [failure for failure in results if failure is not None]

    async def _check_sku_unique(self, sku: str) -> Optional[ValidationFailure]:
        if await self._lookup.sku_exists(sku):
            return ValidationFailure("sku", f"Product with SKU '{sku}' already exists.")
        return None

    async def _check_name_brand_unique(
        self, name: str, brand: str
    ) -> Optional[ValidationFailure]:
        if await self._lookup.name_brand_exists(name, brand):
            return ValidationFailure(
                "name", "A product with the same name and brand already exists."
            )
        return None

    async def _check_business_rules(
        self,
        request: CreateProductRequest,
        context: RuleContext,
        structurally_valid: set[str],
    ) -> list[ValidationFailure]:
        """
        Check rules that span fields or depend on store-wide counts.

        Category/price coupling is evaluated again here; repeats of stage 2
        messages collapse when the outcome is built.
        """
        failures = []

        start_of_day = datetime.combine(context.today, time.min, tzinfo=timezone.utc)
        created_today = await self._lookup.count_created_since(start_of_day)
        if created_today >= self._daily_limit:
            failures.append(
                ValidationFailure(
                    "request",
                    f"Daily product creation limit of {self._daily_limit} has been reached.",
                )
            )

        price_ok = "price" in structurally_valid
        if price_ok and context.category is ProductCategory.ELECTRONICS:
            if not _electronics_price(request, context):
                failures.append(ValidationFailure("price", MSG_ELECTRONICS_PRICE))
        if "name" in structurally_valid and context.category is ProductCategory.HOME:
            if not _home_name(request, context):
                failures.append(ValidationFailure("name", MSG_HOME_NAME))

        if price_ok and "stock_quantity" in structurally_valid:
            price = _as_decimal(request.price)
            if price > EXPENSIVE_PRICE and request.stock_quantity > EXPENSIVE_MAX_STOCK:
                failures.append(ValidationFailure("stock_quantity", MSG_EXPENSIVE_STOCK))

        return failures
