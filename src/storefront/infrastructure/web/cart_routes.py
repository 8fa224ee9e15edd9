"""FastAPI routes for the acting user's cart."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.clear_cart import ClearCartHandler
from storefront.application.remove_cart_item import RemoveCartItemHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.application.view_cart import CartCountHandler, ViewCartHandler
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.web import envelope
from storefront.infrastructure.web.dependencies import current_user, get_uow
from storefront.infrastructure.web.schemas import (
    AddToCartRequest,
    PathId,
    UpdateCartItemRequest,
)

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("")
def view_cart(
    request: Request,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    cart = ViewCartHandler(uow).handle(actor)
    message = "Cart is empty." if not cart.cart_items else "Cart retrieved successfully."
    return envelope.success(request, message, cart)


@router.get("/count")
def cart_count(
    request: Request,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    count = CartCountHandler(uow).handle(actor)
    return envelope.success(request, "Cart count retrieved successfully.", {"count": count})


@router.post("/items")
def add_to_cart(
    request: Request,
    body: AddToCartRequest,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    line = AddToCartHandler(uow).handle(actor, body.product_id, body.quantity)
    message = (
        "Cart updated successfully."
        if line.previous_quantity
        else "Product added to cart successfully."
    )
    return envelope.success(request, message, line)


@router.put("/items/{cart_line_id}")
def update_cart_item(
    request: Request,
    cart_line_id: PathId,
    body: UpdateCartItemRequest,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    line = UpdateCartItemHandler(uow).handle(actor, cart_line_id, body.quantity)
    return envelope.success(request, "Cart item updated successfully.", line)


@router.delete("/items/{cart_line_id}")
def remove_cart_item(
    request: Request,
    cart_line_id: PathId,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    RemoveCartItemHandler(uow).handle(actor, cart_line_id)
    return envelope.success(
        request, "Item removed from cart successfully.", {"cart_id": cart_line_id}
    )


@router.delete("")
def clear_cart(
    request: Request,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    result = ClearCartHandler(uow).handle(actor)
    return envelope.success(request, "Cart cleared successfully.", result)
