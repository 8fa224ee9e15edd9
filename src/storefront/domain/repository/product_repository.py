"""Abstract repositories for the catalog (products and categories).

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Category, Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_page(
        self, offset: int, limit: int, category_id: int | None = None
    ) -> list[Product]:
        """Return one page of products, newest first."""

    @abstractmethod
    def count(self, category_id: int | None = None) -> int:
        """Count products, optionally within one category."""

    @abstractmethod
    def list_flagged(self, flag: str | None, limit: int) -> list[Product]:
        """Return products carrying ``flag`` (or any flag when None), newest first."""

    @abstractmethod
    def search(self, query: str, limit: int) -> list[Product]:
        """Substring search on name and description.

        Exact name matches come first, then name matches, then description
        matches; ties are broken newest first.
        """

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product (assigns ``id`` on insert)."""

    @abstractmethod
    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """Atomically take ``quantity`` units out of stock.

        Returns False, leaving stock untouched, when fewer than
        ``quantity`` units remain.
        """


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_slug(self, slug: str) -> Category | None:
        """Return an *active* category by slug, or None."""

    @abstractmethod
    def list_all(self) -> list[Category]:
        """Return every category."""

    @abstractmethod
    def save(self, category: Category) -> None:
        """Persist a new or updated category."""
