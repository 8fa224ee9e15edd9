"""SQLAlchemy-backed implementations of ProductRepository and CategoryRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.orm import Session

from storefront.domain.model.product import Category, Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import (
    CategoryRepository,
    ProductRepository,
)
from storefront.infrastructure.persistence.tables import CategoryRow, ProductRow

_FLAG_COLUMNS = {
    "featured": ProductRow.is_featured,
    "bestseller": ProductRow.is_bestseller,
    "new": ProductRow.is_new,
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def product_to_domain(row: ProductRow) -> Product:
    category = row.category
    return Product(
        id=row.id,
        name=row.name,
        price=Money(row.price),
        stock_quantity=row.stock_quantity,
        slug=row.slug,
        description=row.description,
        category_id=row.category_id,
        category_name=category.name if category is not None else None,
        category_slug=category.slug if category is not None else None,
        brand=row.brand,
        image_url=row.image_url,
        is_featured=row.is_featured,
        is_bestseller=row.is_bestseller,
        is_new=row.is_new,
        rating=row.rating,
        review_count=row.review_count,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        stmt = (
            select(ProductRow)
            .where(ProductRow.id == product_id)
            .execution_options(populate_existing=True)
        )
        row = self._session.scalars(stmt).first()
        return product_to_domain(row) if row is not None else None

    def list_page(
        self, offset: int, limit: int, category_id: int | None = None
    ) -> list[Product]:
        stmt = select(ProductRow)
        if category_id is not None:
            stmt = stmt.where(ProductRow.category_id == category_id)
        stmt = stmt.order_by(ProductRow.created_at.desc(), ProductRow.id.desc())
        rows = self._session.scalars(stmt.offset(offset).limit(limit)).all()
        return [product_to_domain(r) for r in rows]

    def count(self, category_id: int | None = None) -> int:
        stmt = select(func.count(ProductRow.id))
        if category_id is not None:
            stmt = stmt.where(ProductRow.category_id == category_id)
        return self._session.scalar(stmt) or 0

    def list_flagged(self, flag: str | None, limit: int) -> list[Product]:
        if flag is None:
            condition = or_(*_FLAG_COLUMNS.values())
        else:
            condition = _FLAG_COLUMNS[flag].is_(True)
        stmt = (
            select(ProductRow)
            .where(condition)
            .order_by(ProductRow.created_at.desc(), ProductRow.id.desc())
            .limit(limit)
        )
        return [product_to_domain(r) for r in self._session.scalars(stmt).all()]

    def search(self, query: str, limit: int) -> list[Product]:
        pattern = f"%{_escape_like(query)}%"
        name_match = ProductRow.name.ilike(pattern, escape="\\")
        relevance = case(
            (func.lower(ProductRow.name) == query.lower(), 1),
            (name_match, 2),
            else_=3,
        )
        stmt = (
            select(ProductRow)
            .where(or_(name_match, ProductRow.description.ilike(pattern, escape="\\")))
            .order_by(relevance, ProductRow.created_at.desc(), ProductRow.id.desc())
            .limit(limit)
        )
        return [product_to_domain(r) for r in self._session.scalars(stmt).all()]

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id) if product.id is not None else None
        if row is None:
            row = ProductRow(created_at=product.created_at)
            self._session.add(row)
        else:
            product.updated_at = datetime.now(timezone.utc)

        row.name = product.name
        row.slug = product.slug
        row.description = product.description
        row.price = product.price.rounded().amount
        row.category_id = product.category_id
        row.stock_quantity = product.stock_quantity
        row.brand = product.brand
        row.image_url = product.image_url
        row.is_featured = product.is_featured
        row.is_bestseller = product.is_bestseller
        row.is_new = product.is_new
        row.rating = product.rating
        row.review_count = product.review_count
        row.updated_at = product.updated_at
        self._session.flush()
        product.id = row.id

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        # Single conditional UPDATE: stock can never go below zero even when
        # two transactions decrement the same row.
        stmt = (
            update(ProductRow)
            .where(ProductRow.id == product_id, ProductRow.stock_quantity >= quantity)
            .values(
                stock_quantity=ProductRow.stock_quantity - quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        return result.rowcount == 1


class SqlCategoryRepository(CategoryRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_slug(self, slug: str) -> Category | None:
        stmt = select(CategoryRow).where(
            CategoryRow.slug == slug, CategoryRow.is_active.is_(True)
        )
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[Category]:
        rows = self._session.scalars(select(CategoryRow).order_by(CategoryRow.name)).all()
        return [self._to_domain(r) for r in rows]

    def save(self, category: Category) -> None:
        row = self._session.get(CategoryRow, category.id) if category.id is not None else None
        if row is None:
            row = CategoryRow()
            self._session.add(row)
        row.name = category.name
        row.slug = category.slug
        row.description = category.description
        row.is_active = category.is_active
        self._session.flush()
        category.id = row.id

    @staticmethod
    def _to_domain(row: CategoryRow) -> Category:
        return Category(
            id=row.id,
            name=row.name,
            slug=row.slug,
            description=row.description,
            is_active=row.is_active,
        )
