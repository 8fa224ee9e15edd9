"""Application service: Update Cart Item use case (absolute quantity)."""

from __future__ import annotations

from storefront.application.dto import CartLineDTO
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork


class UpdateCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: AuthenticatedUser, cart_line_id: int, quantity: int) -> CartLineDTO:
        with self._uow:
            line = self._uow.carts.get_line(actor.id, cart_line_id)
            product = (
                self._uow.products.get_by_id(line.product_id) if line is not None else None
            )
            if line is None or product is None:
                raise EntityNotFoundError(
                    "Cart item not found.", {"cart_id": cart_line_id}
                )

            previous = line.quantity.value
            line.set_quantity(product, quantity)
            self._uow.carts.save(line)
            self._uow.commit()

        return CartLineDTO(
            cart_id=line.id,  # type: ignore[arg-type]
            product_id=product.id,  # type: ignore[arg-type]
            product_name=product.name,
            previous_quantity=previous,
            quantity=line.quantity.value,
            unit_price=str(product.price),
            subtotal=str(product.price * line.quantity.value),
        )
