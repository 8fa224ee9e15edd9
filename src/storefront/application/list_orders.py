"""Application service: List Orders use case (query)."""

from __future__ import annotations

from storefront.application.dto import (
    OrderPageDTO,
    PaginationDTO,
    clamp_limit,
    clamp_page,
    order_to_dto,
)
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork

DEFAULT_LIMIT = 10
MAX_LIMIT = 50


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self, actor: AuthenticatedUser, page: int | None = 1, limit: int | None = DEFAULT_LIMIT
    ) -> OrderPageDTO:
        page = clamp_page(page)
        limit = clamp_limit(limit, DEFAULT_LIMIT, MAX_LIMIT)

        with self._uow:
            total = self._uow.orders.count_for_user(actor.id)
            orders = self._uow.orders.list_for_user(actor.id, (page - 1) * limit, limit)

        return OrderPageDTO(
            orders=[order_to_dto(o, with_items=False) for o in orders],
            pagination=PaginationDTO.build(page, limit, total),
        )
