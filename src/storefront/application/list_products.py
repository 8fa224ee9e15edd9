"""Application services: catalog listing queries.

Read-only; none of these touch cart or order state.
"""

from __future__ import annotations

from storefront.application.dto import (
    CategoryRefDTO,
    PaginationDTO,
    ProductDTO,
    ProductPageDTO,
    clamp_limit,
    clamp_page,
    product_to_dto,
)
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import PRODUCT_FLAGS
from storefront.domain.repository.unit_of_work import UnitOfWork

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_FEATURED_LIMIT = 12
MAX_FEATURED_LIMIT = 50


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        page: int | None = 1,
        limit: int | None = DEFAULT_PAGE_SIZE,
        category_id: int | None = None,
    ) -> ProductPageDTO:
        page = clamp_page(page)
        limit = clamp_limit(limit, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)

        with self._uow:
            total = self._uow.products.count(category_id)
            products = self._uow.products.list_page((page - 1) * limit, limit, category_id)

        return ProductPageDTO(
            products=[product_to_dto(p) for p in products],
            pagination=PaginationDTO.build(page, limit, total),
        )


class CategoryProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        slug: str,
        page: int | None = 1,
        limit: int | None = DEFAULT_PAGE_SIZE,
    ) -> ProductPageDTO:
        slug = (slug or "").strip()
        if not slug:
            raise ValidationError("Category slug is required.", {"slug": "Missing category slug."})
        page = clamp_page(page)
        limit = clamp_limit(limit, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)

        with self._uow:
            category = self._uow.categories.get_by_slug(slug)
            if category is None:
                raise EntityNotFoundError("Category not found.", {"slug": slug})
            total = self._uow.products.count(category.id)
            products = self._uow.products.list_page((page - 1) * limit, limit, category.id)

        return ProductPageDTO(
            products=[product_to_dto(p) for p in products],
            pagination=PaginationDTO.build(page, limit, total),
            category=CategoryRefDTO(id=category.id, name=category.name, slug=category.slug),
        )


class FeaturedProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self, flag: str | None = None, limit: int | None = DEFAULT_FEATURED_LIMIT
    ) -> list[ProductDTO]:
        """Products carrying ``flag``, or any of the display flags when omitted."""
        if flag is not None:
            flag = flag.strip().lower()
            if flag not in PRODUCT_FLAGS:
                raise ValidationError(
                    "Invalid type parameter.",
                    {"type": "Type must be one of: " + ", ".join(PRODUCT_FLAGS)},
                )
        limit = clamp_limit(limit, DEFAULT_FEATURED_LIMIT, MAX_FEATURED_LIMIT)

        with self._uow:
            products = self._uow.products.list_flagged(flag, limit)
        return [product_to_dto(p) for p in products]
