"""Unit tests for the Product aggregate."""

from decimal import Decimal

import pytest

from pos.domain.exceptions import InsufficientStockError, ValidationError
from pos.domain.model.product import Product, parse_stock
from pos.domain.model.value_objects import Money


def _milk(stock: int = 10) -> Product:
    return Product(id="SKU1", name="Milk", price=Money.of("350.00"), stock=stock)


class TestProductCreate:

    def test_trims_and_coerces_input(self):
        p = Product.create("  SKU1 ", " Milk ", "350.00", "10", " Dairy ")
        assert p == Product(
            id="SKU1", name="Milk", price=Money(Decimal("350")), category="Dairy", stock=10
        )

    def test_category_defaults_to_empty(self):
        assert Product.create("SKU1", "Milk", 350, 10).category == ""

    @pytest.mark.parametrize("product_id", ["", "   ", None])
    def test_empty_id_rejected(self, product_id):
        with pytest.raises(ValidationError, match="Product ID is required"):
            Product.create(product_id, "Milk", "1", "1")

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            Product.create("SKU1", "  ", "1", "1")

    @pytest.mark.parametrize("price", ["-1", "free", None])
    def test_invalid_price_rejected(self, price):
        with pytest.raises(ValidationError, match="Invalid price"):
            Product.create("SKU1", "Milk", price, "1")

    @pytest.mark.parametrize("stock", ["-1", "lots", None])
    def test_invalid_stock_rejected(self, stock):
        with pytest.raises(ValidationError, match="Invalid stock"):
            Product.create("SKU1", "Milk", "1", stock)


class TestProductUpdateDetails:

    def test_updates_name_price_category_not_stock(self):
        p = _milk(stock=7)
        p.update_details("Fresh Milk", "360", "Dairy")
        assert (p.name, p.price, p.category, p.stock) == ("Fresh Milk", Money.of("360"), "Dairy", 7)

    def test_empty_name_rejected_and_nothing_changes(self):
        p = _milk()
        with pytest.raises(ValidationError, match="cannot be empty"):
            p.update_details("", "1")
        assert p.name == "Milk"

    def test_invalid_price_rejected_and_nothing_changes(self):
        p = _milk()
        with pytest.raises(ValidationError, match="Invalid price"):
            p.update_details("Milk 2", "-5")
        assert p.name == "Milk"
        assert p.price == Money.of("350")


class TestProductAdjustStock:

    def test_decrement(self):
        p = _milk(stock=10)
        assert p.adjust_stock(-3) == 7
        assert p.stock == 7

    def test_increment(self):
        p = _milk(stock=0)
        assert p.adjust_stock(5) == 5

    def test_to_exactly_zero_allowed(self):
        p = _milk(stock=2)
        assert p.adjust_stock(-2) == 0

    def test_below_zero_rejected_and_unchanged(self):
        p = _milk(stock=2)
        with pytest.raises(InsufficientStockError) as exc_info:
            p.adjust_stock(-5)
        assert p.stock == 2
        assert exc_info.value.requested == 5
        assert exc_info.value.available == 2

    def test_below_zero_allowed_when_flagged(self):
        p = _milk(stock=2)
        assert p.adjust_stock(-5, allow_negative=True) == -3

    def test_non_integer_delta_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            _milk().adjust_stock(1.5)


class TestProductMatches:

    def test_matches_name_case_insensitively(self):
        assert _milk().matches("mIL")

    def test_matches_id(self):
        assert _milk().matches("sku")

    def test_no_match(self):
        assert not _milk().matches("bread")


class TestParseStock:

    @pytest.mark.parametrize(
        "raw, expected",
        [(5, 5), ("5", 5), (" 7 ", 7), (4.0, 4), ("4.9", 4), ("x", None), (None, None), (True, None)],
    )
    def test_parse(self, raw, expected):
        assert parse_stock(raw) == expected
