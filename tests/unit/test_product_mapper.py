"""
Unit tests for the product mapper and its resolvers.
"""
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from internal.domain.product import ProductCategory
from internal.usecase.product_mapper import (
    CURRENCY_FORMATS,
    MappingContext,
    ProductMapper,
    apply_category_price,
    currency_format_for,
    resolve_availability_status,
    resolve_brand_initials,
    resolve_category_display_name,
    resolve_product_age,
)


NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def context():
    """Mapping context pinned to NOW with en_US currency."""
    return MappingContext(now=NOW, currency=CURRENCY_FORMATS["en_US"])


@pytest.fixture
def mapper(fixed_clock):
    """Mapper with a fixed clock and a fixed id."""
    return ProductMapper(
        clock=fixed_clock,
        id_factory=lambda: UUID("12345678-1234-5678-1234-567812345678"),
    )


class TestToEntity:
    """Tests for request to entity mapping."""

    def test_maps_request_fields(self, mapper, electronics_request):
        """Test the generated and derived entity fields."""
        product = mapper.to_entity(electronics_request)

        assert product.id == UUID("12345678-1234-5678-1234-567812345678")
        assert product.name == "Smart Watch Pro"
        assert product.category is ProductCategory.ELECTRONICS
        assert product.price == Decimal("249.99")
        assert product.created_at == NOW
        assert product.updated_at is None
        assert product.is_available is True

    def test_home_price_is_discounted(self, mapper, home_request):
        """Test that Home products are stored 10% off."""
        product = mapper.to_entity(home_request)

        assert product.price == Decimal("90.00")
        assert product.category is ProductCategory.HOME

    def test_zero_stock_is_unavailable(self, mapper, book_request):
        """Test the availability flag for empty stock."""
        product = mapper.to_entity(replace(book_request, stock_quantity=0))

        assert product.is_available is False

    def test_sku_is_normalized(self, mapper, book_request):
        """Test that spaces are removed from the stored SKU."""
        product = mapper.to_entity(replace(book_request, sku="BOOK 123 45"))

        assert product.sku == "BOOK12345"

    @pytest.mark.parametrize("url", ["", "   "])
    def test_blank_image_url_is_stored_as_none(self, mapper, book_request, url):
        """Test that an empty or whitespace-only image URL is not stored."""
        product = mapper.to_entity(replace(book_request, image_url=url))

        assert product.image_url is None

    def test_padded_image_url_is_stripped(self, mapper, book_request):
        """Test that the stored URL is the one the rules checked."""
        product = mapper.to_entity(
            replace(book_request, image_url="  https://cdn.example.com/cover.png ")
        )

        assert product.image_url == "https://cdn.example.com/cover.png"

    def test_unknown_category_raises(self, mapper, book_request):
        """Test that unvalidated requests with bad categories are refused."""
        with pytest.raises(ValueError):
            mapper.to_entity(replace(book_request, category="Toys"))


class TestCategoryPrice:
    """Tests for the category price adjustment."""

    @pytest.mark.parametrize("price,expected", [
        (Decimal("100"), Decimal("90.00")),
        (Decimal("19.99"), Decimal("17.99")),   # 17.991
        (Decimal("0.05"), Decimal("0.05")),     # 0.045 rounds away from zero
        (Decimal("10.05"), Decimal("9.05")),    # 9.045 rounds away from zero
    ])
    def test_home_discount_rounding(self, price, expected):
        """Test half-away-from-zero rounding of the Home discount."""
        assert apply_category_price(ProductCategory.HOME, price) == expected

    @pytest.mark.parametrize("category", [
        ProductCategory.ELECTRONICS,
        ProductCategory.CLOTHING,
        ProductCategory.BOOKS,
    ])
    def test_other_categories_unchanged(self, category):
        """Test that only Home is discounted."""
        assert apply_category_price(category, Decimal("19.99")) == Decimal("19.99")


class TestResolvers:
    """Tests for individual profile resolvers."""

    @pytest.mark.parametrize("category,expected", [
        (ProductCategory.ELECTRONICS, "Electronics & Technology"),
        (ProductCategory.CLOTHING, "Clothing & Fashion"),
        (ProductCategory.BOOKS, "Books & Media"),
        (ProductCategory.HOME, "Home & Garden"),
        ("Toys", "Uncategorized"),
    ])
    def test_category_display_name(self, make_product, context, category, expected):
        """Test the category display name table."""
        product = make_product(category=category)

        assert resolve_category_display_name(product, context) == expected

    @pytest.mark.parametrize("brand,expected", [
        ("Super Brand", "SB"),
        ("Acme", "A"),
        ("", "?"),
        ("   ", "?"),
        ("acme  widget   works", "AW"),
        ("  nordic home ", "NH"),
    ])
    def test_brand_initials(self, make_product, context, brand, expected):
        """Test brand initials for blank, single and multi-word brands."""
        assert resolve_brand_initials(make_product(brand=brand), context) == expected

    @pytest.mark.parametrize("available,stock,expected", [
        (False, 50, "Out of Stock"),
        (False, 1, "Out of Stock"),
        (True, 0, "Unavailable"),
        (True, 1, "Last Item"),
        (True, 2, "Limited Stock"),
        (True, 5, "Limited Stock"),
        (True, 6, "In Stock"),
    ])
    def test_availability_status(self, make_product, context, available, stock, expected):
        """Test the availability wording."""
        product = make_product(is_available=available, stock_quantity=stock)

        assert resolve_availability_status(product, context) == expected

    @pytest.mark.parametrize("days,expected", [
        (-1, "Releases in the future"),
        (0, "New Release"),
        (29, "New Release"),
        (30, "1 month old"),
        (59, "1 month old"),
        (60, "2 months old"),
        (364, "12 months old"),
        (365, "1 year old"),
        (729, "1 year old"),
        (730, "2 years old"),
        (1824, "4 years old"),
        (1825, "Classic"),
        (1826, "Classic"),
        (4000, "Classic"),
    ])
    def test_product_age(self, make_product, context, days, expected):
        """Test age buckets, including the 1824/1825/1826 day boundary."""
        product = make_product(release_date=NOW.date() - timedelta(days=days))

        assert resolve_product_age(product, context) == expected


class TestCurrencyFormat:
    """Tests for locale currency formatting."""

    def test_en_us(self):
        """Test the default US format."""
        assert CURRENCY_FORMATS["en_US"].format(Decimal("1234.5")) == "$1,234.50"

    def test_de_de(self):
        """Test a symbol-last locale with swapped separators."""
        assert CURRENCY_FORMATS["de_DE"].format(Decimal("1234.5")) == "1.234,50 €"

    def test_negative_amount(self):
        """Test the sign placement for negative amounts."""
        assert CURRENCY_FORMATS["en_US"].format(Decimal("-3")) == "-$3.00"

    def test_unknown_locale_falls_back_to_en_us(self):
        """Test the locale fallback."""
        assert currency_format_for("xx_XX") is CURRENCY_FORMATS["en_US"]


class TestToOutput:
    """Tests for entity to profile mapping."""

    def test_profile_fields(self, mapper, make_product):
        """Test a complete Electronics profile."""
        profile = mapper.to_output(make_product(brand="Acme Devices", stock_quantity=12))

        assert profile.category_display_name == "Electronics & Technology"
        assert profile.price == Decimal("249.99")
        assert profile.formatted_price == "$249.99"
        assert profile.brand_initials == "AD"
        assert profile.availability_status == "In Stock"
        assert profile.product_age == "1 year old"
        assert profile.image_url == "https://cdn.example.com/watch.png"

    def test_home_profile_hides_image_and_keeps_stored_price(self, mapper, home_request):
        """Test that Home output suppresses the image and is not discounted twice."""
        product = mapper.to_entity(home_request)

        profile = mapper.to_output(product)

        assert profile.price == Decimal("90.00")
        assert profile.formatted_price == "$90.00"
        assert profile.image_url is None

    def test_missing_image_passes_through(self, mapper, make_product):
        """Test that a missing image stays missing."""
        profile = mapper.to_output(make_product(image_url=None))

        assert profile.image_url is None

    def test_output_is_idempotent(self, mapper, make_product):
        """Test that mapping the same entity twice gives equal profiles."""
        product = make_product()

        first = mapper.to_output(product)
        second = mapper.to_output(product)

        assert first == second
        assert product.price == Decimal("249.99")

    def test_explicit_now_overrides_clock(self, mapper, make_product):
        """Test that callers can pin the age reference time."""
        product = make_product(release_date=date(2020, 1, 1))

        profile = mapper.to_output(product, now=datetime(2020, 1, 10, tzinfo=timezone.utc))

        assert profile.product_age == "New Release"

    def test_to_dict(self, mapper, make_product):
        """Test the serialized profile shape."""
        data = mapper.to_output(make_product()).to_dict()

        assert data["category"] == "Electronics"
        assert data["price"] == "249.99"
        assert data["formatted_price"] == "$249.99"
        assert data["release_date"] == "2025-01-10"
