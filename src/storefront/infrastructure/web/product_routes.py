"""FastAPI routes for the public catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from storefront.application.list_products import (
    CategoryProductsHandler,
    FeaturedProductsHandler,
    ListProductsHandler,
)
from storefront.application.search_products import SearchProductsHandler
from storefront.application.show_product import ShowProductHandler
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.web import envelope
from storefront.infrastructure.web.dependencies import get_uow
from storefront.infrastructure.web.schemas import PathId, QueryId

router = APIRouter(tags=["products"])


@router.get("/products")
def list_products(
    request: Request,
    page: int = 1,
    limit: int = 20,
    category_id: QueryId = None,
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    result = ListProductsHandler(uow).handle(page=page, limit=limit, category_id=category_id)
    return envelope.success(request, "Products retrieved successfully.", result)


# Declared before /products/{product_id} so the literal paths win.
@router.get("/products/featured")
def featured_products(
    request: Request,
    type: str | None = None,
    limit: int = 12,
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    products = FeaturedProductsHandler(uow).handle(flag=type, limit=limit)
    return envelope.success(
        request,
        "Featured products retrieved successfully.",
        {"products": products, "count": len(products), "type": type or "all"},
    )


@router.get("/products/search")
def search_products(
    request: Request,
    q: str | None = None,
    limit: int = 50,
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    products = SearchProductsHandler(uow).handle(q, limit=limit)
    return envelope.success(
        request,
        f"Found {len(products)} product(s) matching your search.",
        {"products": products, "count": len(products), "query": (q or "").strip()},
    )


@router.get("/products/{product_id}")
def show_product(
    request: Request,
    product_id: PathId,
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    product = ShowProductHandler(uow).handle(product_id)
    return envelope.success(request, "Product retrieved successfully.", {"product": product})


@router.get("/categories/{slug}/products")
def category_products(
    request: Request,
    slug: str,
    page: int = 1,
    limit: int = 20,
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    result = CategoryProductsHandler(uow).handle(slug, page=page, limit=limit)
    return envelope.success(request, "Category products retrieved successfully.", result)
