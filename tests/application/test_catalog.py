"""Tests for the catalog queries and the product update use case."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.application.list_products import (
    CategoryProductsHandler,
    FeaturedProductsHandler,
    ListProductsHandler,
)
from storefront.application.search_products import SearchProductsHandler
from storefront.application.show_product import ShowProductHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from tests.fakes import FakeStore, FakeUnitOfWork

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _setup():
    store = FakeStore()
    books = store.add_category("Books", "books")
    store.add_category("Archive", "archive", is_active=False)
    store.add_product("Blue Lamp", "20.00", 3, created_at=T0, is_featured=True)
    store.add_product(
        "Lamp", "15.00", 0, created_at=T0 + timedelta(days=1), is_new=True, description="desk light"
    )
    store.add_product(
        "Reading Guide", "9.00", 7, created_at=T0 + timedelta(days=2),
        category_id=books.id, description="best lamp positions", is_bestseller=True,
    )
    store.add_product("Poster", "5.00", 1, created_at=T0 + timedelta(days=3))
    return store, FakeUnitOfWork(store), books


class TestListProducts:

    def test_newest_first_with_pagination(self):
        _, uow, _ = _setup()

        page = ListProductsHandler(uow).handle(page=1, limit=3)

        assert [p.name for p in page.products] == ["Poster", "Reading Guide", "Lamp"]
        assert page.pagination.total == 4
        assert page.pagination.total_pages == 2
        assert page.pagination.has_next is True

    def test_limit_is_clamped(self):
        _, uow, _ = _setup()
        assert ListProductsHandler(uow).handle(limit=1000).pagination.limit == 100
        assert ListProductsHandler(uow).handle(limit=0).pagination.limit == 20

    def test_category_filter(self):
        _, uow, books = _setup()
        page = ListProductsHandler(uow).handle(category_id=books.id)
        assert [p.name for p in page.products] == ["Reading Guide"]
        assert page.products[0].category.slug == "books"


class TestCategoryProducts:

    def test_by_slug(self):
        _, uow, _ = _setup()
        page = CategoryProductsHandler(uow).handle("books")
        assert page.category.name == "Books"
        assert len(page.products) == 1

    @pytest.mark.parametrize("slug", ["archive", "missing"])
    def test_inactive_or_unknown_category(self, slug):
        _, uow, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Category not found"):
            CategoryProductsHandler(uow).handle(slug)


class TestFeaturedProducts:

    def test_any_flag_when_type_omitted(self):
        _, uow, _ = _setup()
        names = [p.name for p in FeaturedProductsHandler(uow).handle()]
        assert names == ["Reading Guide", "Lamp", "Blue Lamp"]

    def test_single_flag(self):
        _, uow, _ = _setup()
        assert [p.name for p in FeaturedProductsHandler(uow).handle("bestseller")] == ["Reading Guide"]

    def test_invalid_type(self):
        _, uow, _ = _setup()
        with pytest.raises(ValidationError, match="Invalid type parameter"):
            FeaturedProductsHandler(uow).handle("cheap")


class TestSearch:

    def test_exact_name_then_name_then_description(self):
        _, uow, _ = _setup()
        names = [p.name for p in SearchProductsHandler(uow).handle("lamp")]
        assert names == ["Lamp", "Blue Lamp", "Reading Guide"]

    @pytest.mark.parametrize("query", [None, "", " a "])
    def test_query_too_short(self, query):
        _, uow, _ = _setup()
        with pytest.raises(ValidationError):
            SearchProductsHandler(uow).handle(query)


class TestShowAndUpdateProduct:

    def test_show(self):
        _, uow, _ = _setup()
        dto = ShowProductHandler(uow).handle(2)
        assert dto.name == "Lamp"
        assert dto.in_stock is False
        assert dto.price == "15.00"

    def test_show_missing(self):
        _, uow, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            ShowProductHandler(uow).handle(99)

    def test_update_price_and_stock(self):
        store, uow, _ = _setup()
        dto = UpdateProductHandler(uow).handle(1, new_price="24.90", stock_quantity=12)
        assert dto.price == "24.90"
        assert store.products[1].stock_quantity == 12

    def test_update_requires_something(self):
        _, uow, _ = _setup()
        with pytest.raises(ValidationError, match="Nothing to update"):
            UpdateProductHandler(uow).handle(1)

    def test_negative_stock_rejected(self):
        store, uow, _ = _setup()
        with pytest.raises(ValidationError):
            UpdateProductHandler(uow).handle(1, stock_quantity=-1)
        assert store.products[1].stock_quantity == 3
