"""FastAPI routes for checkout and orders."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as SchemaValidationError

from storefront.application.create_order import CreateOrderHandler
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.model.user import AuthenticatedUser, Role
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.web import envelope
from storefront.infrastructure.web.dependencies import current_user, get_uow, require_role
from storefront.infrastructure.web.schemas import (
    CreateOrderRequest,
    PathId,
    UpdateOrderStatusRequest,
)

router = APIRouter(prefix="/orders", tags=["orders"])

require_admin = require_role(Role.ADMIN)


async def status_update_body(
    request: Request,
    actor: AuthenticatedUser = Depends(require_admin),
) -> UpdateOrderStatusRequest:
    """Parse the status payload; runs only after the admin check passed."""
    raw = await request.body()
    try:
        return UpdateOrderStatusRequest.model_validate_json(raw or b"{}")
    except SchemaValidationError as exc:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in exc.errors(include_url=False)]
        ) from None


@router.post("", status_code=201)
def create_order(
    request: Request,
    body: CreateOrderRequest,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    order = CreateOrderHandler(uow).handle(
        actor,
        shipping_address=body.shipping_address,
        shipping_city=body.shipping_city,
        shipping_postal_code=body.shipping_postal_code,
        payment_method=body.payment_method,
    )
    return envelope.success(
        request, "Order created successfully!", {"order": order}, status_code=201
    )


@router.get("")
def list_orders(
    request: Request,
    page: int = 1,
    limit: int = 10,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    result = ListOrdersHandler(uow).handle(actor, page=page, limit=limit)
    return envelope.success(request, "Orders retrieved successfully.", result)


@router.get("/{order_id}")
def show_order(
    request: Request,
    order_id: PathId,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    order = ShowOrderHandler(uow).handle(actor, order_id)
    return envelope.success(request, "Order retrieved successfully.", {"order": order})


@router.post("/{order_id}/status")
def update_order_status(
    request: Request,
    order_id: PathId,
    actor: AuthenticatedUser = Depends(require_admin),
    body: UpdateOrderStatusRequest = Depends(status_update_body),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    change = UpdateOrderStatusHandler(uow).handle(actor, order_id, body.status)
    return envelope.success(
        request,
        f"Order status updated from '{change.previous_status}' to '{change.new_status}'.",
        change,
    )
