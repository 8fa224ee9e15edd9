"""Unit tests for the Order aggregate and its business rules."""

import random
from datetime import datetime

import pytest

from storefront.domain.exceptions import StatusUnchangedError, ValidationError
from storefront.domain.model.cart import CartSnapshotLine
from storefront.domain.model.order import (
    Order,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    calculate_totals,
    generate_order_number,
)
from storefront.domain.model.value_objects import Money, ShippingAddress

SHIPPING = ShippingAddress("Hauptstrasse 1", "Berlin", "10115")


def _line(product_id: int = 1, qty: int = 1, price: str = "15.00", name: str = "Widget") -> CartSnapshotLine:
    """Helper to build a cart snapshot line."""
    return CartSnapshotLine(
        cart_line_id=product_id,
        product_id=product_id,
        product_name=name,
        quantity=qty,
        unit_price=Money.of(price),
        stock_available=100,
    )


def _place(*lines: CartSnapshotLine) -> Order:
    return Order.place(
        user_id=7,
        lines=list(lines),
        shipping=SHIPPING,
        payment_method=PaymentMethod.CASH_ON_DELIVERY,
        order_number="CT202611010001",
    )


class TestOrderPlacement:

    def test_worked_example_totals(self):
        order = _place(_line(qty=2, price="100.00"))
        assert order.subtotal == Money.of("200.00")
        assert order.tax_amount == Money.of("38.00")
        assert order.total_price == Money.of("238.00")

    def test_new_order_is_pending_and_unpaid(self):
        order = _place(_line())
        assert order.id is None  # assigned by repository
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING

    def test_lines_copy_the_snapshot_price(self):
        order = _place(_line(qty=3, price="9.99", name="Gadget"))
        item = order.items[0]
        assert item.product_name == "Gadget"
        assert item.price_at_purchase == Money.of("9.99")
        assert item.line_total == Money.of("29.97")

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _place()

    def test_counts(self):
        order = _place(_line(1, qty=2), _line(2, qty=5))
        assert order.items_count == 2
        assert order.total_quantity == 7


class TestTotals:

    @pytest.mark.parametrize(
        "prices, qtys",
        [
            (["0.01"], [1]),
            (["19.99", "0.05"], [3, 7]),
            (["33.33", "66.67", "12.34"], [1, 2, 9]),
        ],
    )
    def test_total_equals_subtotal_plus_tax(self, prices, qtys):
        lines = [_line(i, qty=q, price=p) for i, (p, q) in enumerate(zip(prices, qtys), start=1)]
        subtotal, tax, total = calculate_totals(_place(*lines).items)
        assert total == subtotal + tax
        assert total == (subtotal * (1 + Money.of("0.19").amount)).rounded()

    def test_tax_is_rounded_half_up(self):
        # 0.05 * 0.19 = 0.0095 -> 0.01
        order = _place(_line(qty=1, price="0.05"))
        assert order.tax_amount == Money.of("0.01")
        assert order.total_price == Money.of("0.06")


class TestStatusChanges:

    def test_any_status_may_follow_any_other(self):
        order = _place(_line())
        order.change_status(OrderStatus.DELIVERED, changed_by=1)
        order.change_status(OrderStatus.PENDING, changed_by=1)
        assert order.status == OrderStatus.PENDING

    def test_change_is_recorded(self):
        order = _place(_line())
        change = order.change_status(OrderStatus.SHIPPED, changed_by=3)
        assert change.previous_status == OrderStatus.PENDING
        assert change.new_status == OrderStatus.SHIPPED
        assert change.changed_by == 3
        assert order.status_history == [change]
        assert order.updated_at == change.changed_at

    def test_same_status_rejected(self):
        order = _place(_line())
        with pytest.raises(StatusUnchangedError, match="already has this status") as exc_info:
            order.change_status(OrderStatus.PENDING)
        assert exc_info.value.errors["current_status"] == "pending"

    def test_totals_untouched_by_status_change(self):
        order = _place(_line(qty=2, price="100.00"))
        order.change_status(OrderStatus.CANCELLED)
        assert order.total_price == Money.of("238.00")


class TestParsing:

    @pytest.mark.parametrize("raw", ["shipped", " SHIPPED ", "Shipped"])
    def test_status_is_normalised(self, raw):
        assert OrderStatus.parse(raw) == OrderStatus.SHIPPED

    @pytest.mark.parametrize("raw, message", [(None, "required"), ("", "required"), ("lost", "Invalid status")])
    def test_bad_status_rejected(self, raw, message):
        with pytest.raises(ValidationError) as exc_info:
            OrderStatus.parse(raw)
        assert message in exc_info.value.errors["status"]

    def test_payment_method_defaults_to_cash_on_delivery(self):
        assert PaymentMethod.parse(None) == PaymentMethod.CASH_ON_DELIVERY

    def test_unknown_payment_method_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            PaymentMethod.parse("bitcoin")
        assert "payment_method" in exc_info.value.errors


class TestOrderNumber:

    def test_format(self):
        number = generate_order_number(datetime(2026, 3, 9), random.Random(1))
        assert number.startswith("CT20260309")
        assert len(number) == 14
        assert number[2:].isdigit()
