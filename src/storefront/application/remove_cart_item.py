"""Application service: Remove Cart Item use case."""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork


class RemoveCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: AuthenticatedUser, cart_line_id: int) -> None:
        with self._uow:
            if not self._uow.carts.delete_line(actor.id, cart_line_id):
                raise EntityNotFoundError(
                    "Cart item not found.", {"cart_id": cart_line_id}
                )
            self._uow.commit()
