"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order, StatusChange


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return any order by its ID, or None if not found."""

    @abstractmethod
    def get_for_user(self, user_id: int, order_id: int) -> Order | None:
        """Return an order only if it belongs to ``user_id``."""

    @abstractmethod
    def list_for_user(self, user_id: int, offset: int, limit: int) -> list[Order]:
        """Return one page of the user's orders, newest first."""

    @abstractmethod
    def count_for_user(self, user_id: int) -> int:
        """Count the user's orders."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order with its lines and assign its ``id``.

        Raises DuplicateOrderNumberError, with nothing persisted, when the
        order number is already taken.
        """

    @abstractmethod
    def record_status_change(self, order: Order, change: StatusChange) -> None:
        """Persist the order's new status and append to its history."""
