"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        assert Money.of(10).amount == Decimal("10")

    def test_of_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)  # type: ignore[arg-type]

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_multiplication_by_int_and_decimal(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")
        assert Money.of("200") * Decimal("0.19") == Money.of("38.00")

    def test_multiplication_by_float_or_bool_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1") * 1.5  # type: ignore[operator]
        with pytest.raises(TypeError):
            Money.of("1") * True

    def test_rounding_is_half_up_to_cents(self):
        assert Money.of("0.125").rounded() == Money.of("0.13")
        assert Money.of("0.124").rounded() == Money.of("0.12")

    def test_str_has_two_decimals(self):
        assert str(Money.of("15")) == "15.00"
        assert str(Money.of("9.5")) == "9.50"
        assert str(Money.of("1.005")) == "1.01"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") >= Money.of("10")

    def test_zero(self):
        assert Money.zero() == Money.of("0")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_positive_quantity(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(value)

    @pytest.mark.parametrize("value", [True, 1.0, "2"])
    def test_non_integer_rejected(self, value):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(value)


# ── ShippingAddress ──────────────────────────────────────────────────────────


class TestShippingAddress:

    def test_fields_are_trimmed(self):
        shipping = ShippingAddress.create("  Hauptstrasse 1 ", " Berlin", "10115 ")
        assert shipping == ShippingAddress("Hauptstrasse 1", "Berlin", "10115")
        assert shipping.full_address == "Hauptstrasse 1, Berlin 10115"

    def test_every_missing_field_is_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            ShippingAddress.create(None, "  ", "")
        assert set(exc_info.value.errors) == {
            "shipping_address",
            "shipping_city",
            "shipping_postal_code",
        }
