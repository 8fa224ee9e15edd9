"""Application service: Update Product use case (price and stock)."""

from __future__ import annotations

from storefront.application.dto import ProductDTO, product_to_dto
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int,
        new_price: str | None = None,
        stock_quantity: int | None = None,
    ) -> ProductDTO:
        """Update a product's price and/or stock.

        A price change does NOT affect any existing orders; their lines
        captured ``price_at_purchase`` at checkout.
        """
        if new_price is None and stock_quantity is None:
            raise ValidationError("Nothing to update: give a new price or a stock quantity")

        with self._uow:
            product = self._uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if new_price is not None:
                product.update_price(Money.of(new_price))
            if stock_quantity is not None:
                product.set_stock(stock_quantity)
            self._uow.products.save(product)
            self._uow.commit()

        return product_to_dto(product)
