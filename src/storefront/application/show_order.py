"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: AuthenticatedUser, order_id: int) -> OrderDTO:
        """Return one of the actor's orders.

        Someone else's order is reported exactly like a missing one.
        """
        with self._uow:
            order = self._uow.orders.get_for_user(actor.id, order_id)
        if order is None:
            raise EntityNotFoundError(
                "Order not found.",
                {
                    "message": "The order does not exist or you do not have permission to view it.",
                    "order_id": order_id,
                },
            )
        return order_to_dto(order)
