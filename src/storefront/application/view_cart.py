"""Application services: View Cart and Cart Count (queries)."""

from __future__ import annotations

from storefront.application.dto import (
    CartDTO,
    CartItemDTO,
    CartSummaryDTO,
    iso,
    product_to_dto,
)
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork


class ViewCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: AuthenticatedUser) -> CartDTO:
        """Return the cart priced at *current* product prices."""
        with self._uow:
            items = self._uow.carts.list_items(actor.id)

        total = Money.zero()
        for item in items:
            total = total + item.subtotal

        return CartDTO(
            cart_items=[
                CartItemDTO(
                    cart_id=item.cart_line_id,
                    product=product_to_dto(item.product),
                    quantity=item.quantity,
                    stock_available=item.product.stock_quantity,
                    in_stock=item.product.in_stock,
                    subtotal=str(item.subtotal),
                    added_at=iso(item.added_at),
                )
                for item in items
            ],
            summary=CartSummaryDTO(
                total_items=sum(item.quantity for item in items),
                total_unique_products=len(items),
                cart_total=str(total),
            ),
        )


class CartCountHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: AuthenticatedUser) -> int:
        with self._uow:
            return self._uow.carts.total_quantity(actor.id)
