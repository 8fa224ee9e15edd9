"""Application service: Clear Cart use case."""

from __future__ import annotations

from storefront.application.dto import ClearCartDTO
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork


class ClearCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: AuthenticatedUser) -> ClearCartDTO:
        with self._uow:
            quantity = self._uow.carts.total_quantity(actor.id)
            removed = self._uow.carts.clear(actor.id)
            self._uow.commit()
        return ClearCartDTO(items_removed=removed, total_quantity_removed=quantity)
