"""Unit of Work: one database transaction spanning several repositories.

Usage::

    with uow:
        ...                 # read and write through uow.<repository>
        uow.commit()

Leaving the block without ``commit()`` (or because of an exception) rolls
back every change made inside it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import (
    CategoryRepository,
    ProductRepository,
)
from storefront.domain.repository.user_repository import SessionRepository, UserRepository


class UnitOfWork(ABC):
    products: ProductRepository
    categories: CategoryRepository
    carts: CartRepository
    orders: OrderRepository
    users: UserRepository
    sessions: SessionRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Always safe: a no-op once committed.
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change since the block was entered durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted change."""
