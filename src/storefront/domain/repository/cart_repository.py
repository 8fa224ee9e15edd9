"""Abstract repository for cart lines.

Every method takes the owner's ``user_id`` and must scope its lookup or
mutation to that owner: a line belonging to somebody else behaves exactly
like a line that does not exist.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartItemView, CartLine, CartSnapshotLine


class CartRepository(ABC):

    @abstractmethod
    def get_line(self, user_id: int, line_id: int) -> CartLine | None:
        """Return the owner's cart line, or None."""

    @abstractmethod
    def get_line_for_product(self, user_id: int, product_id: int) -> CartLine | None:
        """Return the owner's line for a product, or None."""

    @abstractmethod
    def list_items(self, user_id: int) -> list[CartItemView]:
        """Return the owner's lines joined with live product data, newest first."""

    @abstractmethod
    def lines_with_product_snapshot(self, user_id: int) -> list[CartSnapshotLine]:
        """Return the owner's lines with the product's current price and stock.

        Implementations lock the product rows for the rest of the
        transaction where the database supports it.
        """

    @abstractmethod
    def save(self, line: CartLine) -> None:
        """Insert a new line or update the owner's existing line.

        Inserting a second line for the same product raises
        ``DuplicateCartLineError``.
        """

    @abstractmethod
    def delete_line(self, user_id: int, line_id: int) -> bool:
        """Delete one of the owner's lines; False if there was none."""

    @abstractmethod
    def clear(self, user_id: int) -> int:
        """Delete all of the owner's lines, returning how many were removed."""

    @abstractmethod
    def total_quantity(self, user_id: int) -> int:
        """Sum of quantities across the owner's lines."""
