"""Tests for the CreateOrder (checkout) use case.

Uses the in-memory store and units of work from ``tests.fakes``.
"""

import pytest

from storefront.application.create_order import MAX_ORDER_NUMBER_ATTEMPTS, CreateOrderHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import (
    ConflictError,
    EmptyCartError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeStore, FakeUnitOfWork, InjectedFailure, fail_with

SHIPPING = {
    "shipping_address": "Hauptstrasse 1",
    "shipping_city": "Berlin",
    "shipping_postal_code": "10115",
}


def _numbers(*values: str):
    """Order-number factory returning ``values`` in turn, then the last one forever."""
    remaining = list(values)

    def factory() -> str:
        return remaining.pop(0) if len(remaining) > 1 else remaining[0]

    return factory


def _setup(stock: int = 5, price: str = "100.00", qty: int = 2, number: str = "CT202601010001"):
    """One customer with one product in the cart."""
    store = FakeStore()
    user = store.add_user("alice@example.com")
    product = store.add_product("Widget A", price, stock)
    store.add_cart_line(user.id, product.id, qty)
    uow = FakeUnitOfWork(store)
    handler = CreateOrderHandler(uow, order_number_factory=_numbers(number))
    return handler, store, uow, AuthenticatedUser.from_user(user), product


class TestCheckoutHappyPath:

    def test_worked_example(self):
        handler, store, _, actor, product = _setup(stock=5, price="100.00", qty=2)

        dto = handler.handle(actor, **SHIPPING)

        assert dto.subtotal == "200.00"
        assert dto.tax_amount == "38.00"
        assert dto.tax_rate == "19%"
        assert dto.total_price == "238.00"
        assert dto.status == "pending"
        assert dto.items_count == 1
        assert store.stock_of(product.id) == 3
        assert store.cart_of(actor.id) == []

    def test_order_is_persisted_with_lines(self):
        handler, store, _, actor, product = _setup()
        dto = handler.handle(actor, **SHIPPING)

        order = store.orders[dto.order_id]
        assert order.user_id == actor.id
        assert order.order_number == "CT202601010001"
        [item] = order.items
        assert item.product_id == product.id
        assert item.product_name == "Widget A"
        assert item.quantity.value == 2
        assert item.price_at_purchase == Money.of("100.00")

    def test_shipping_snapshot_and_default_payment(self):
        handler, _, _, actor, _ = _setup()
        dto = handler.handle(actor, **SHIPPING)
        assert dto.payment_method == "cash_on_delivery"
        assert dto.shipping_info.full_address == "Hauptstrasse 1, Berlin 10115"

    def test_explicit_payment_method(self):
        handler, _, _, actor, _ = _setup()
        dto = handler.handle(actor, payment_method="card", **SHIPPING)
        assert dto.payment_method == "card"

    def test_commits_exactly_once(self):
        handler, _, uow, actor, _ = _setup()
        handler.handle(actor, **SHIPPING)
        assert uow.commits == 1

    def test_multiple_lines(self):
        handler, store, _, actor, product = _setup(stock=10, price="19.99", qty=3)
        other = store.add_product("Widget B", "0.05", 10)
        store.add_cart_line(actor.id, other.id, 7)

        dto = handler.handle(actor, **SHIPPING)

        # 3 * 19.99 + 7 * 0.05 = 60.32; tax 11.4608 -> 11.46
        assert dto.subtotal == "60.32"
        assert dto.tax_amount == "11.46"
        assert dto.total_price == "71.78"
        assert store.stock_of(product.id) == 7
        assert store.stock_of(other.id) == 3

    def test_other_users_cart_is_left_alone(self):
        handler, store, _, actor, product = _setup()
        bob = store.add_user("bob@example.com")
        store.add_cart_line(bob.id, product.id, 1)

        handler.handle(actor, **SHIPPING)

        assert len(store.cart_of(bob.id)) == 1


class TestCheckoutRejections:

    def test_empty_cart(self):
        handler, store, uow, actor, _ = _setup()
        store.cart_lines.clear()

        with pytest.raises(EmptyCartError, match="Cart is empty"):
            handler.handle(actor, **SHIPPING)
        assert store.orders == {}
        assert uow.commits == 0

    def test_insufficient_stock_lists_every_line(self):
        handler, store, _, actor, product = _setup(stock=1, qty=2)
        other = store.add_product("Widget B", "5.00", 0)
        fine = store.add_product("Widget C", "5.00", 10)
        store.add_cart_line(actor.id, other.id, 1)
        store.add_cart_line(actor.id, fine.id, 1)

        with pytest.raises(InsufficientStockError) as exc_info:
            handler.handle(actor, **SHIPPING)

        violations = exc_info.value.errors["items_with_insufficient_stock"]
        assert [(v["product_name"], v["requested"], v["available"]) for v in violations] == [
            ("Widget A", 2, 1),
            ("Widget B", 1, 0),
        ]
        assert store.orders == {}
        assert store.stock_of(fine.id) == 10
        assert len(store.cart_of(actor.id)) == 3

    def test_missing_shipping_fields_reported_together(self):
        handler, store, uow, actor, _ = _setup()

        with pytest.raises(ValidationError) as exc_info:
            handler.handle(actor, shipping_address=" ", shipping_city=None, shipping_postal_code="")

        assert set(exc_info.value.errors) == {
            "shipping_address",
            "shipping_city",
            "shipping_postal_code",
        }
        assert store.orders == {}
        assert uow.commits == 0

    def test_invalid_payment_method(self):
        handler, store, _, actor, _ = _setup()
        with pytest.raises(ValidationError) as exc_info:
            handler.handle(actor, payment_method="paypal", **SHIPPING)
        assert "payment_method" in exc_info.value.errors
        assert store.orders == {}


class TestCheckoutAtomicity:

    @pytest.mark.parametrize(
        "checkpoint",
        ["orders.add", "products.decrement_stock", "carts.clear", "commit"],
    )
    def test_failure_at_any_step_leaves_no_trace(self, checkpoint):
        handler, store, _, actor, product = _setup(stock=5, qty=2)
        store.hooks[checkpoint] = fail_with(f"boom at {checkpoint}")

        with pytest.raises(InjectedFailure):
            handler.handle(actor, **SHIPPING)

        assert store.orders == {}
        assert store.stock_of(product.id) == 5
        [line] = store.cart_of(actor.id)
        assert line.quantity.value == 2

    def test_failure_on_second_decrement_restores_the_first(self):
        handler, store, _, actor, product = _setup(stock=5, qty=2)
        other = store.add_product("Widget B", "5.00", 4)
        store.add_cart_line(actor.id, other.id, 4)

        def arm_second_decrement():
            store.hooks["products.decrement_stock"] = fail_with("second decrement")

        store.hooks["products.decrement_stock"] = arm_second_decrement

        with pytest.raises(InjectedFailure, match="second decrement"):
            handler.handle(actor, **SHIPPING)

        assert store.stock_of(product.id) == 5
        assert store.stock_of(other.id) == 4
        assert store.orders == {}
        assert len(store.cart_of(actor.id)) == 2


class TestPriceFreezing:

    def test_later_price_change_does_not_touch_the_order(self):
        handler, store, _, actor, product = _setup(price="100.00", qty=2)
        dto = handler.handle(actor, **SHIPPING)

        UpdateProductHandler(FakeUnitOfWork(store)).handle(product.id, new_price="150.00")

        order = ShowOrderHandler(FakeUnitOfWork(store)).handle(actor, dto.order_id)
        assert order.items[0].price_at_purchase == "100.00"
        assert order.subtotal == "200.00"
        assert order.total_price == "238.00"


class TestOrderNumberCollisions:

    def _two_customers(self, numbers):
        store = FakeStore()
        product = store.add_product("Widget A", "10.00", 10)
        actors = []
        for email in ("alice@example.com", "bob@example.com"):
            user = store.add_user(email)
            store.add_cart_line(user.id, product.id, 1)
            actors.append(AuthenticatedUser.from_user(user))
        handler = CreateOrderHandler(FakeUnitOfWork(store), order_number_factory=_numbers(*numbers))
        return handler, store, actors

    def test_collision_is_retried_with_a_fresh_number(self):
        handler, store, (alice, bob) = self._two_customers(
            ["CT202601010001", "CT202601010001", "CT202601010002"]
        )
        first = handler.handle(alice, **SHIPPING)
        second = handler.handle(bob, **SHIPPING)

        assert first.order_number == "CT202601010001"
        assert second.order_number == "CT202601010002"
        assert len(store.orders) == 2

    def test_gives_up_after_bounded_attempts(self):
        handler, store, (alice, bob) = self._two_customers(["CT202601010001"])
        handler.handle(alice, **SHIPPING)

        with pytest.raises(ConflictError) as exc_info:
            handler.handle(bob, **SHIPPING)

        assert exc_info.value.errors == {"attempts": MAX_ORDER_NUMBER_ATTEMPTS}
        assert len(store.orders) == 1
        assert store.stock_of(1) == 9
        assert len(store.cart_of(bob.id)) == 1


class TestInterleavedCheckouts:
    """Bob's whole checkout runs after Alice has read her cart but before
    she writes anything."""

    def _race(self, stock: int, alice_qty: int, bob_qty: int):
        store = FakeStore()
        product = store.add_product("Widget A", "10.00", stock)
        alice = store.add_user("alice@example.com")
        bob = store.add_user("bob@example.com")
        store.add_cart_line(alice.id, product.id, alice_qty)
        store.add_cart_line(bob.id, product.id, bob_qty)

        alice_handler = CreateOrderHandler(
            FakeUnitOfWork(store), order_number_factory=_numbers("CT202601010001")
        )
        bob_handler = CreateOrderHandler(
            FakeUnitOfWork(store), order_number_factory=_numbers("CT202601010002")
        )
        bob_actor = AuthenticatedUser.from_user(bob)
        store.hooks["carts.snapshot"] = lambda: bob_handler.handle(bob_actor, **SHIPPING)
        return store, product, alice_handler, AuthenticatedUser.from_user(alice), bob_actor

    def test_second_checkout_cannot_oversell(self):
        store, product, alice_handler, alice, bob = self._race(stock=5, alice_qty=3, bob_qty=3)

        with pytest.raises(InsufficientStockError) as exc_info:
            alice_handler.handle(alice, **SHIPPING)

        [violation] = exc_info.value.violations
        assert violation["requested"] == 3
        assert violation["available"] == 2
        assert store.stock_of(product.id) == 2
        assert [o.user_id for o in store.orders.values()] == [bob.id]
        assert store.cart_of(bob.id) == []
        assert len(store.cart_of(alice.id)) == 1

    def test_both_succeed_when_stock_suffices(self):
        store, product, alice_handler, alice, _ = self._race(stock=6, alice_qty=3, bob_qty=3)

        alice_handler.handle(alice, **SHIPPING)

        assert store.stock_of(product.id) == 0
        assert len(store.orders) == 2
