"""SQLAlchemy-backed implementation of OrderRepository."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from storefront.domain.exceptions import DuplicateOrderNumberError
from storefront.domain.model.order import (
    Order,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    StatusChange,
)
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.tables import (
    OrderItemRow,
    OrderRow,
    OrderStatusHistoryRow,
)


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.scalars(self._select().where(OrderRow.id == order_id)).first()
        return self._to_domain(row) if row is not None else None

    def get_for_user(self, user_id: int, order_id: int) -> Order | None:
        stmt = self._select().where(OrderRow.id == order_id, OrderRow.user_id == user_id)
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def list_for_user(self, user_id: int, offset: int, limit: int) -> list[Order]:
        stmt = (
            self._select()
            .where(OrderRow.user_id == user_id)
            .order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_domain(r) for r in self._session.scalars(stmt).all()]

    def count_for_user(self, user_id: int) -> int:
        stmt = select(func.count(OrderRow.id)).where(OrderRow.user_id == user_id)
        return self._session.scalar(stmt) or 0

    def add(self, order: Order) -> None:
        row = self._to_row(order)
        try:
            # Savepoint: a collision undoes only this insert, not the
            # surrounding checkout transaction.
            with self._session.begin_nested():
                self._session.add(row)
                self._session.flush()
        except IntegrityError:
            if self._order_number_taken(order.order_number):
                raise DuplicateOrderNumberError(
                    "Order number already in use.",
                    {"order_number": order.order_number},
                ) from None
            raise

        order.id = row.id
        for item, item_row in zip(order.items, row.items):
            item.id = item_row.id

    def record_status_change(self, order: Order, change: StatusChange) -> None:
        self._session.execute(
            update(OrderRow)
            .where(OrderRow.id == order.id)
            .values(status=change.new_status.value, updated_at=change.changed_at)
            .execution_options(synchronize_session=False)
        )
        self._session.add(
            OrderStatusHistoryRow(
                order_id=order.id,
                previous_status=change.previous_status.value,
                new_status=change.new_status.value,
                changed_by=change.changed_by,
                changed_at=change.changed_at,
            )
        )
        self._session.flush()

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _select():
        return select(OrderRow).options(
            selectinload(OrderRow.items), selectinload(OrderRow.history)
        ).execution_options(populate_existing=True)

    def _order_number_taken(self, order_number: str) -> bool:
        stmt = select(OrderRow.id).where(OrderRow.order_number == order_number)
        return self._session.scalar(stmt) is not None

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_row(order: Order) -> OrderRow:
        return OrderRow(
            user_id=order.user_id,
            order_number=order.order_number,
            subtotal=order.subtotal.rounded().amount,
            tax_amount=order.tax_amount.rounded().amount,
            total_price=order.total_price.rounded().amount,
            status=order.status.value,
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            shipping_address=order.shipping.address,
            shipping_city=order.shipping.city,
            shipping_postal_code=order.shipping.postal_code,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemRow(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    price_at_purchase=item.price_at_purchase.rounded().amount,
                )
                for item in order.items
            ],
        )

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.id,
            user_id=row.user_id,
            order_number=row.order_number,
            items=[
                OrderLine(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=Quantity(item.quantity),
                    price_at_purchase=Money(item.price_at_purchase),
                )
                for item in row.items
            ],
            subtotal=Money(row.subtotal),
            tax_amount=Money(row.tax_amount),
            total_price=Money(row.total_price),
            shipping=ShippingAddress(
                address=row.shipping_address,
                city=row.shipping_city,
                postal_code=row.shipping_postal_code,
            ),
            payment_method=PaymentMethod(row.payment_method),
            status=OrderStatus(row.status),
            payment_status=PaymentStatus(row.payment_status),
            created_at=row.created_at,
            updated_at=row.updated_at,
            status_history=[
                StatusChange(
                    previous_status=OrderStatus(h.previous_status),
                    new_status=OrderStatus(h.new_status),
                    changed_by=h.changed_by,
                    changed_at=h.changed_at,
                )
                for h in row.history
            ],
        )
