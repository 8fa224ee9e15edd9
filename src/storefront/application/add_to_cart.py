"""Application service: Add To Cart use case.

Adds a product to the actor's cart, or increases the quantity when the
product is already there.  The resulting quantity may never exceed the
product's current stock.
"""

from __future__ import annotations

from storefront.application.dto import CartLineDTO
from storefront.domain.exceptions import DuplicateCartLineError, EntityNotFoundError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.product import Product
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork


class AddToCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: AuthenticatedUser, product_id: int, quantity: int = 1) -> CartLineDTO:
        with self._uow:
            product = self._uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(
                    "Product not found.", {"product_id": "Product does not exist."}
                )

            line, previous = self._add(actor.id, product, quantity)
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

    def _add(self, user_id: int, product: Product, quantity: int) -> tuple[CartLine, int]:
        """Return the saved line and its quantity before this call."""
        line = self._uow.carts.get_line_for_product(user_id, product.id)  # type: ignore[arg-type]
        if line is None:
            line = CartLine.create(user_id, product, quantity)
            try:
                self._uow.carts.save(line)
                return line, 0
            except DuplicateCartLineError:
                # Inserted by a concurrent request after the lookup above.
                line = self._uow.carts.get_line_for_product(user_id, product.id)  # type: ignore[arg-type]
                if line is None:
                    raise

        previous = line.quantity.value
        line.add(product, quantity)
        self._uow.carts.save(line)
        return line, previous
