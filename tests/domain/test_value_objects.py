"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")

    def test_of_factory_from_string(self):
        m = Money.of("25.99")
        assert m.amount == Decimal("25.99")

    def test_of_factory_from_float_keeps_short_repr(self):
        assert Money.of(350.0).amount == Decimal("350.0")

    def test_of_factory_strips_whitespace(self):
        assert Money.of(" 12.5 ") == Money.of("12.50")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    @pytest.mark.parametrize("raw", ["abc", "", None, True, "NaN", "Infinity"])
    def test_non_numeric_rejected(self, raw):
        with pytest.raises(ValidationError):
            Money.of(raw)

    def test_subtraction(self):
        assert Money.of("1200") - Money.of("1050") == Money.of("150")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_multiplication_by_int(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("7.50") * 1.5

    def test_rounded_half_up(self):
        assert Money.of("2.675").rounded().amount == Decimal("2.68")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "15.00"
        assert str(Money.of("9.5")) == "9.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10")
        assert Money.of("10") <= Money.of("10.00")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_positive(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("raw", [0, -2])
    def test_non_positive_rejected(self, raw):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(raw)

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(2.5)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)
