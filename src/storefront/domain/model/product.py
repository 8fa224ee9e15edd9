"""Product and Category.

Products live independently of carts and orders. Prices change and stock
moves, but an order keeps its own copy of the price it was placed at.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

PRODUCT_FLAGS = ("featured", "bestseller", "new")


@dataclass
class Category:
    id: int | None
    name: str
    slug: str
    description: str | None = None
    is_active: bool = True


@dataclass
class Product:
    """A product in the catalog.

    Invariant: ``stock_quantity`` is never negative.
    """

    id: int | None
    name: str
    price: Money
    stock_quantity: int = 0
    slug: str | None = None
    description: str | None = None
    category_id: int | None = None
    category_name: str | None = None
    category_slug: str | None = None
    brand: str | None = None
    image_url: str | None = None
    is_featured: bool = False
    is_bestseller: bool = False
    is_new: bool = False
    rating: Decimal = Decimal("0")
    review_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    def can_supply(self, quantity: int) -> bool:
        return quantity <= self.stock_quantity

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because order lines
        capture ``price_at_purchase`` at checkout time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.stock_quantity = quantity
