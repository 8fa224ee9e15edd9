"""Cart lines: one (user, product, quantity) record prior to checkout."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import InsufficientStockError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity


def _stock_violation(product: Product, requested: int) -> InsufficientStockError:
    return InsufficientStockError(
        f"Only {product.stock_quantity} unit(s) of {product.name} available in stock.",
        [
            {
                "product_id": product.id,
                "product_name": product.name,
                "requested": requested,
                "available": product.stock_quantity,
            }
        ],
    )


@dataclass
class CartLine:
    """A single product in a user's cart.

    Unique per (user_id, product_id).  The quantity can never exceed the
    product's current stock at the moment it is set.
    """

    id: int | None
    user_id: int
    product_id: int
    quantity: Quantity
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    @staticmethod
    def create(user_id: int, product: Product, quantity: int) -> CartLine:
        qty = Quantity(quantity)
        if not product.can_supply(qty.value):
            raise _stock_violation(product, qty.value)
        return CartLine(id=None, user_id=user_id, product_id=product.id, quantity=qty)  # type: ignore[arg-type]

    def add(self, product: Product, quantity: int) -> None:
        """Increase the quantity, keeping it within the product's stock."""
        added = Quantity(quantity)
        self.set_quantity(product, self.quantity.value + added.value)

    def set_quantity(self, product: Product, quantity: int) -> None:
        qty = Quantity(quantity)
        if not product.can_supply(qty.value):
            raise _stock_violation(product, qty.value)
        self.quantity = qty
        self.updated_at = datetime.now(timezone.utc)


@dataclass(frozen=True)
class CartSnapshotLine:
    """A cart line joined with the product's price and stock as of now.

    Read once at the start of checkout; the price captured here becomes
    ``price_at_purchase``.
    """

    cart_line_id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Money
    stock_available: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartItemView:
    """A cart line enriched with live product data, for display."""

    cart_line_id: int
    product: Product
    quantity: int
    added_at: datetime

    @property
    def subtotal(self) -> Money:
        return self.product.price * self.quantity
