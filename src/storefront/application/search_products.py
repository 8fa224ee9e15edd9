"""Application service: Search Products use case (query)."""

from __future__ import annotations

from storefront.application.dto import ProductDTO, clamp_limit, product_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.repository.unit_of_work import UnitOfWork

MIN_QUERY_LENGTH = 2
DEFAULT_LIMIT = 50
MAX_LIMIT = 100


class SearchProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, query: str | None, limit: int | None = DEFAULT_LIMIT) -> list[ProductDTO]:
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query is required.", {"q": "Please enter a search term."})
        if len(query) < MIN_QUERY_LENGTH:
            raise ValidationError(
                "Search query too short.",
                {"q": f"Please enter at least {MIN_QUERY_LENGTH} characters to search."},
            )
        limit = clamp_limit(limit, DEFAULT_LIMIT, MAX_LIMIT)

        with self._uow:
            products = self._uow.products.search(query, limit)
        return [product_to_dto(p) for p in products]
