"""SQLAlchemy-backed implementation of CartRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.domain.exceptions import DuplicateCartLineError
from storefront.domain.model.cart import CartItemView, CartLine, CartSnapshotLine
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.sql_product_repository import product_to_domain
from storefront.infrastructure.persistence.tables import CartItemRow, ProductRow


class SqlCartRepository(CartRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- CartRepository interface ---------------------------------------------

    def get_line(self, user_id: int, line_id: int) -> CartLine | None:
        stmt = select(CartItemRow).where(
            CartItemRow.id == line_id, CartItemRow.user_id == user_id
        )
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def get_line_for_product(self, user_id: int, product_id: int) -> CartLine | None:
        stmt = select(CartItemRow).where(
            CartItemRow.user_id == user_id, CartItemRow.product_id == product_id
        )
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def list_items(self, user_id: int) -> list[CartItemView]:
        stmt = (
            select(CartItemRow, ProductRow)
            .join(ProductRow, ProductRow.id == CartItemRow.product_id)
            .where(CartItemRow.user_id == user_id)
            .order_by(CartItemRow.created_at.desc(), CartItemRow.id.desc())
        )
        return [
            CartItemView(
                cart_line_id=line.id,
                product=product_to_domain(product),
                quantity=line.quantity,
                added_at=line.created_at,
            )
            for line, product in self._session.execute(stmt).all()
        ]

    def lines_with_product_snapshot(self, user_id: int) -> list[CartSnapshotLine]:
        stmt = (
            select(
                CartItemRow.id,
                CartItemRow.product_id,
                CartItemRow.quantity,
                ProductRow.name,
                ProductRow.price,
                ProductRow.stock_quantity,
            )
            .join(ProductRow, ProductRow.id == CartItemRow.product_id)
            .where(CartItemRow.user_id == user_id)
            .order_by(CartItemRow.id)
            .with_for_update(of=ProductRow)
        )
        return [
            CartSnapshotLine(
                cart_line_id=row.id,
                product_id=row.product_id,
                product_name=row.name,
                quantity=row.quantity,
                unit_price=Money(row.price),
                stock_available=row.stock_quantity,
            )
            for row in self._session.execute(stmt).all()
        ]

    def save(self, line: CartLine) -> None:
        if line.id is None:
            row = CartItemRow(
                user_id=line.user_id,
                product_id=line.product_id,
                quantity=line.quantity.value,
                created_at=line.created_at,
                updated_at=line.updated_at,
            )
            try:
                with self._session.begin_nested():
                    self._session.add(row)
                    self._session.flush()
            except IntegrityError:
                if self.get_line_for_product(line.user_id, line.product_id) is not None:
                    raise DuplicateCartLineError(
                        "Product is already in the cart.",
                        {"product_id": line.product_id},
                    ) from None
                raise
            line.id = row.id
            return

        self._session.execute(
            update(CartItemRow)
            .where(CartItemRow.id == line.id, CartItemRow.user_id == line.user_id)
            .values(
                quantity=line.quantity.value,
                updated_at=line.updated_at or datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )

    def delete_line(self, user_id: int, line_id: int) -> bool:
        result = self._session.execute(
            delete(CartItemRow)
            .where(CartItemRow.id == line_id, CartItemRow.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def clear(self, user_id: int) -> int:
        result = self._session.execute(
            delete(CartItemRow)
            .where(CartItemRow.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def total_quantity(self, user_id: int) -> int:
        stmt = select(func.coalesce(func.sum(CartItemRow.quantity), 0)).where(
            CartItemRow.user_id == user_id
        )
        return int(self._session.scalar(stmt) or 0)

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: CartItemRow) -> CartLine:
        return CartLine(
            id=row.id,
            user_id=row.user_id,
            product_id=row.product_id,
            quantity=Quantity(row.quantity),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
