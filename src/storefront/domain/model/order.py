"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.  Once placed, only
``status`` and ``payment_status`` may change; everything else (lines,
prices, totals, shipping) is a historical record.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import StatusUnchangedError, ValidationError
from storefront.domain.model.cart import CartSnapshotLine
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, raw: str | None) -> OrderStatus:
        value = (raw or "").strip().lower()
        if not value:
            raise ValidationError("Validation failed.", {"status": "Status is required."})
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValidationError(
                "Validation failed.",
                {"status": f"Invalid status. Valid statuses: {valid}"},
            ) from None

    @property
    def label(self) -> str:
        return self.value.capitalize()


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    BANK_TRANSFER = "bank_transfer"
    CARD = "card"

    @classmethod
    def parse(cls, raw: str | None) -> PaymentMethod:
        """Parse a payment method, defaulting to cash on delivery when omitted."""
        if raw is None:
            return cls.CASH_ON_DELIVERY
        try:
            return cls(raw)
        except ValueError:
            raise ValidationError(
                "Validation failed.",
                {
                    "payment_method": "Invalid payment method. Must be: "
                    "cash_on_delivery, bank_transfer, or card."
                },
            ) from None


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
TAX_RATE = Decimal("0.19")
ORDER_NUMBER_PREFIX = "CT"


def generate_order_number(
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> str:
    """Human-readable order number: prefix + YYYYMMDD + 4 random digits.

    Not guaranteed unique; callers retry on collision.
    """
    now = now or datetime.now(timezone.utc)
    rng = rng or random.SystemRandom()
    return f"{ORDER_NUMBER_PREFIX}{now:%Y%m%d}{rng.randint(0, 9999):04d}"


@dataclass
class OrderLine:
    """Captures the price of a product at the moment of purchase.

    ``price_at_purchase`` is a frozen copy; later product price changes
    never reach it.
    """

    product_id: int
    product_name: str
    quantity: Quantity
    price_at_purchase: Money
    id: int | None = None

    @property
    def line_total(self) -> Money:
        return self.price_at_purchase * self.quantity.value


@dataclass
class StatusChange:
    previous_status: OrderStatus
    new_status: OrderStatus
    changed_by: int | None
    changed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.place()`` for new orders; it computes the totals from the
    cart snapshot.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without recomputing.

    Invariants: ``total_price == subtotal + tax_amount`` and
    ``tax_amount == subtotal * TAX_RATE`` (both rounded to cents).
    """

    id: int | None
    user_id: int
    order_number: str
    items: list[OrderLine]
    subtotal: Money
    tax_amount: Money
    total_price: Money
    shipping: ShippingAddress
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None
    status_history: list[StatusChange] = field(default_factory=list)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        user_id: int,
        lines: list[CartSnapshotLine],
        shipping: ShippingAddress,
        payment_method: PaymentMethod,
        order_number: str,
    ) -> Order:
        """Build a pending order from a cart snapshot."""
        if not lines:
            raise ValidationError("Order must contain at least one item")

        items = [
            OrderLine(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=Quantity(line.quantity),
                price_at_purchase=line.unit_price,  # <-- price snapshot
            )
            for line in lines
        ]
        subtotal, tax, total = calculate_totals(items)

        return Order(
            id=None,
            user_id=user_id,
            order_number=order_number,
            items=items,
            subtotal=subtotal,
            tax_amount=tax,
            total_price=total,
            shipping=shipping,
            payment_method=payment_method,
        )

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: OrderStatus, changed_by: int | None = None) -> StatusChange:
        """Move to ``new_status``.

        Any status may follow any other; only a no-op is rejected.
        """
        if new_status == self.status:
            raise StatusUnchangedError(
                "Order already has this status.",
                {
                    "order_id": self.id,
                    "order_number": self.order_number,
                    "current_status": self.status.value,
                    "requested_status": new_status.value,
                },
            )
        change = StatusChange(
            previous_status=self.status,
            new_status=new_status,
            changed_by=changed_by,
        )
        self.status = new_status
        self.updated_at = change.changed_at
        self.status_history.append(change)
        return change

    # --- Computed properties --------------------------------------------------

    @property
    def items_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity.value for item in self.items)


def calculate_totals(items: list[OrderLine]) -> tuple[Money, Money, Money]:
    """Return (subtotal, tax, total) rounded to cents.

    The sum and tax are computed at full precision; rounding happens once at
    the end.  Because the subtotal is already a whole number of cents,
    ``total == round(subtotal * (1 + TAX_RATE), 2) == subtotal + tax``.
    """
    subtotal = Money.zero()
    for item in items:
        subtotal = subtotal + item.line_total
    tax = subtotal * TAX_RATE
    total = subtotal + tax
    return subtotal.rounded(), tax.rounded(), total.rounded()
