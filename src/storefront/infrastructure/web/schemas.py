"""Pydantic request schemas for the HTTP API.

These are the external contracts.  Shape and type problems are rejected
here with a 422; business rules stay in the application handlers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Path, Query
from pydantic import BaseModel, Field

# Database ids are signed 64-bit integers; anything larger names no row.
MAX_ID = 2**63 - 1

EntityId = Annotated[int, Field(ge=1, le=MAX_ID)]
PathId = Annotated[int, Path(ge=1, le=MAX_ID)]
QueryId = Annotated[int | None, Query(ge=1, le=MAX_ID)]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: EntityId
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    """Shipping fields are checked by the checkout handler (400 on failure)."""

    shipping_address: str | None = None
    shipping_city: str | None = None
    shipping_postal_code: str | None = None
    payment_method: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": "Hauptstrasse 1",
                    "shipping_city": "Berlin",
                    "shipping_postal_code": "10115",
                    "payment_method": "cash_on_delivery",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str | None = None
