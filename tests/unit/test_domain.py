"""
Unit tests for domain entities.
"""
import pytest
from datetime import datetime, timezone

from internal.domain.errors import (
    DomainValidationError,
    ProductCreationError,
    ProductValidationError,
)
from internal.domain.product import ProductCategory
from internal.domain.validation import ValidationFailure, ValidationOutcome
from internal.domain.value_objects import OperationId, normalize_sku


class TestValidationOutcome:
    """Tests for ValidationOutcome."""

    def test_success_is_valid(self):
        """Test that an empty outcome is valid."""
        outcome = ValidationOutcome()

        assert outcome.is_valid
        assert outcome.summary() == ""
        assert outcome.to_dict() == {}

    def test_from_failures_drops_duplicates_keeping_order(self):
        """Test duplicate removal with first-seen order."""
        outcome = ValidationOutcome.from_failures([
            ValidationFailure("price", "too low"),
            ValidationFailure("name", "missing"),
            ValidationFailure("price", "too low"),
        ])

        assert outcome.messages() == ["too low", "missing"]
        assert not outcome.is_valid

    def test_same_message_on_different_fields_is_kept(self):
        """Test that duplicates are detected per field."""
        outcome = ValidationOutcome.from_failures([
            ValidationFailure("name", "bad"),
            ValidationFailure("brand", "bad"),
        ])

        assert len(outcome.failures) == 2

    def test_to_dict_groups_by_field(self):
        """Test the grouped dictionary shape."""
        outcome = ValidationOutcome.from_failures([
            ValidationFailure("price", "a"),
            ValidationFailure("stock_quantity", "b"),
            ValidationFailure("price", "c"),
        ])

        assert outcome.to_dict() == {"price": ["a", "c"], "stock_quantity": ["b"]}
        assert outcome.for_field("price") == ["a", "c"]
        assert outcome.for_field("brand") == []


class TestOperationId:
    """Tests for OperationId value object."""

    def test_valid(self):
        """Test creating a valid operation ID."""
        assert str(OperationId("AB12CD34")) == "AB12CD34"

    @pytest.mark.parametrize("value", ["ABC", "ABCDEFGHI", "abcdefgh", "ABCD-EFG"])
    def test_invalid(self, value):
        """Test that malformed IDs raise validation error."""
        with pytest.raises(DomainValidationError):
            OperationId(value)

    def test_from_bytes_uses_first_eight(self):
        """Test that extra bytes are ignored."""
        assert OperationId.from_bytes(bytes(range(10))).value == "ABCDEFGH"

    def test_from_bytes_too_short(self):
        """Test that fewer than eight bytes are rejected."""
        with pytest.raises(DomainValidationError):
            OperationId.from_bytes(b"\x00\x01")


class TestSku:
    """Tests for SKU normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("ABC-123", "ABC-123"),
        (" AB C 12 3 ", "ABC123"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize(self, raw, expected):
        """Test that all spaces are removed."""
        assert normalize_sku(raw) == expected


class TestProductCategory:
    """Tests for category parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("Electronics", ProductCategory.ELECTRONICS),
        ("home", ProductCategory.HOME),
        (" BOOKS ", ProductCategory.BOOKS),
        (ProductCategory.CLOTHING, ProductCategory.CLOTHING),
        ("Toys", None),
        (3, None),
        (None, None),
    ])
    def test_parse(self, raw, expected):
        """Test parsing of members, names and unknown values."""
        assert ProductCategory.parse(raw) is expected


class TestProduct:
    """Tests for Product entity."""

    def test_to_dict(self, make_product):
        """Test converting product to dictionary."""
        product = make_product()

        result = product.to_dict()

        assert result["id"] == str(product.id)
        assert result["category"] == "Electronics"
        assert result["price"] == "249.99"
        assert result["release_date"] == "2025-01-10"
        assert result["updated_at"] is None

    def test_to_dict_with_update_timestamp(self, make_product):
        """Test that set update timestamps are serialized."""
        product = make_product(updated_at=datetime(2026, 6, 16, tzinfo=timezone.utc))

        assert product.to_dict()["updated_at"] == "2026-06-16T00:00:00+00:00"

    def test_default_ids_are_unique(self, make_product):
        """Test that each product gets its own identifier."""
        assert make_product().id != make_product().id


class TestErrors:
    """Tests for domain errors."""

    def test_validation_error_carries_outcome(self):
        """Test the validation error message and payload."""
        outcome = ValidationOutcome.from_failures([
            ValidationFailure("name", "Product name is required."),
            ValidationFailure("brand", "Brand is required."),
        ])

        error = ProductValidationError(outcome)

        assert error.outcome is outcome
        assert str(error) == "Product name is required.; Brand is required."

    def test_creation_error(self):
        """Test the creation error message and attributes."""
        error = ProductCreationError("disk full", operation_id="ABCDEFGH")

        assert error.reason == "disk full"
        assert error.operation_id == "ABCDEFGH"
        assert "disk full" in str(error)
