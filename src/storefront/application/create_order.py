"""Application service: Create Order (checkout) use case.

Turns the acting user's cart into a priced, immutable order.  Everything
after input validation happens inside one unit of work:

1. Load the cart joined with each product's current price and stock.
2. Reject the whole checkout if any line exceeds the available stock.
3. Price the order from the prices read in step 1 (never client prices).
4. Insert the order under a fresh order number, retrying on collision.
5. Take the purchased units out of stock with a conditional decrement.
6. Empty the cart and commit.

Any failure rolls the unit of work back, so there is never a partial order,
a partial stock decrement or a half-cleared cart.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from storefront.application.dto import (
    TAX_RATE_LABEL,
    OrderSummaryDTO,
    shipping_to_dto,
)
from storefront.domain.exceptions import (
    ConflictError,
    DomainException,
    DuplicateOrderNumberError,
    EmptyCartError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.cart import CartSnapshotLine
from storefront.domain.model.order import (
    Order,
    OrderLine,
    PaymentMethod,
    generate_order_number,
)
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.model.value_objects import ShippingAddress
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5


class CreateOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        order_number_factory: Callable[[], str] = generate_order_number,
    ) -> None:
        self._uow = uow
        self._order_number_factory = order_number_factory

    def handle(
        self,
        actor: AuthenticatedUser,
        shipping_address: str | None,
        shipping_city: str | None,
        shipping_postal_code: str | None,
        payment_method: str | None = None,
    ) -> OrderSummaryDTO:
        shipping, method = self._validate(
            shipping_address, shipping_city, shipping_postal_code, payment_method
        )
        log = logger.bind(user_id=actor.id)

        with self._uow:
            try:
                lines = self._uow.carts.lines_with_product_snapshot(actor.id)
                if not lines:
                    raise EmptyCartError(
                        "Cart is empty. Add products to cart before creating an order."
                    )
                self._check_stock(lines)

                order = self._insert_order(actor.id, lines, shipping, method)
                for item in order.items:
                    self._take_stock(item)
                self._uow.carts.clear(actor.id)

                self._uow.commit()
            except DomainException as exc:
                log.info("order_rejected", reason=type(exc).__name__, message=exc.message)
                raise
            except Exception:
                log.exception("order_creation_failed", rolled_back=True)
                raise

        log.info(
            "order_created",
            order_id=order.id,
            order_number=order.order_number,
            total_price=str(order.total_price),
            items_count=order.items_count,
        )
        return self._to_dto(order)

    # --- Steps ----------------------------------------------------------------

    @staticmethod
    def _validate(
        address: str | None,
        city: str | None,
        postal_code: str | None,
        payment_method: str | None,
    ) -> tuple[ShippingAddress, PaymentMethod]:
        """Check every field up front and report all problems at once."""
        errors: dict[str, str] = {}
        shipping = method = None
        try:
            shipping = ShippingAddress.create(address, city, postal_code)
        except ValidationError as exc:
            errors.update(exc.errors)
        try:
            method = PaymentMethod.parse(payment_method)
        except ValidationError as exc:
            errors.update(exc.errors)
        if errors:
            raise ValidationError("Validation failed.", errors)
        return shipping, method  # type: ignore[return-value]

    @staticmethod
    def _check_stock(lines: list[CartSnapshotLine]) -> None:
        violations = [
            {
                "product_id": line.product_id,
                "product_name": line.product_name,
                "requested": line.quantity,
                "available": line.stock_available,
            }
            for line in lines
            if line.quantity > line.stock_available
        ]
        if violations:
            raise InsufficientStockError(
                "Insufficient stock for one or more items.", violations
            )

    def _insert_order(
        self,
        user_id: int,
        lines: list[CartSnapshotLine],
        shipping: ShippingAddress,
        method: PaymentMethod,
    ) -> Order:
        for attempt in range(1, MAX_ORDER_NUMBER_ATTEMPTS + 1):
            order = Order.place(
                user_id=user_id,
                lines=lines,
                shipping=shipping,
                payment_method=method,
                order_number=self._order_number_factory(),
            )
            try:
                self._uow.orders.add(order)
            except DuplicateOrderNumberError:
                logger.warning(
                    "order_number_collision",
                    order_number=order.order_number,
                    attempt=attempt,
                )
                continue
            return order

        raise ConflictError(
            "Could not allocate a unique order number. Please try again.",
            {"attempts": MAX_ORDER_NUMBER_ATTEMPTS},
        )

    def _take_stock(self, item: OrderLine) -> None:
        qty = item.quantity.value
        if self._uow.products.decrement_stock(item.product_id, qty):
            return

        # Another checkout took the stock after our snapshot was read.
        product = self._uow.products.get_by_id(item.product_id)
        available = product.stock_quantity if product is not None else 0
        raise InsufficientStockError(
            "Insufficient stock for one or more items.",
            [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "requested": qty,
                    "available": available,
                }
            ],
        )

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_dto(order: Order) -> OrderSummaryDTO:
        return OrderSummaryDTO(
            order_id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            subtotal=str(order.subtotal),
            tax_amount=str(order.tax_amount),
            tax_rate=TAX_RATE_LABEL,
            total_price=str(order.total_price),
            status=order.status.value,
            payment_method=order.payment_method.value,
            items_count=order.items_count,
            shipping_info=shipping_to_dto(order),
        )
