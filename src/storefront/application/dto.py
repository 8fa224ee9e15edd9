"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the web/CLI layers and the application layer
without exposing domain internals.  Money is rendered as a two-decimal
string and datetimes as ISO 8601 strings, so every DTO serialises to JSON
as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from math import ceil

from storefront.domain.model.order import TAX_RATE, Order
from storefront.domain.model.product import Product
from storefront.domain.model.user import User

TAX_RATE_LABEL = f"{int(TAX_RATE * 100)}%"


def iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# --- Pagination ---------------------------------------------------------------


@dataclass(frozen=True)
class PaginationDTO:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @staticmethod
    def build(page: int, limit: int, total: int) -> PaginationDTO:
        total_pages = ceil(total / limit) if limit else 0
        return PaginationDTO(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    if limit is None or limit < 1:
        return default
    return min(limit, maximum)


# Keeps the row offset within a 64-bit integer.
MAX_PAGE = 1_000_000_000


def clamp_page(page: int | None) -> int:
    if page is None or page < 1:
        return 1
    return min(page, MAX_PAGE)


# --- Catalog --------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryRefDTO:
    id: int | None
    name: str | None
    slug: str | None


@dataclass(frozen=True)
class ProductDTO:
    id: int
    name: str
    slug: str | None
    description: str | None
    price: str
    category: CategoryRefDTO
    brand: str | None
    image_url: str | None
    stock_quantity: int
    in_stock: bool
    is_featured: bool
    is_bestseller: bool
    is_new: bool
    rating: str
    review_count: int
    created_at: str | None


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,  # type: ignore[arg-type]
        name=product.name,
        slug=product.slug,
        description=product.description,
        price=str(product.price),
        category=CategoryRefDTO(
            id=product.category_id,
            name=product.category_name,
            slug=product.category_slug,
        ),
        brand=product.brand,
        image_url=product.image_url,
        stock_quantity=product.stock_quantity,
        in_stock=product.in_stock,
        is_featured=product.is_featured,
        is_bestseller=product.is_bestseller,
        is_new=product.is_new,
        rating=f"{product.rating:.1f}",
        review_count=product.review_count,
        created_at=iso(product.created_at),
    )


@dataclass(frozen=True)
class ProductPageDTO:
    products: list[ProductDTO]
    pagination: PaginationDTO
    category: CategoryRefDTO | None = None


# --- Cart ---------------------------------------------------------------------


@dataclass(frozen=True)
class CartItemDTO:
    cart_id: int
    product: ProductDTO
    quantity: int
    stock_available: int
    in_stock: bool
    subtotal: str
    added_at: str | None


@dataclass(frozen=True)
class CartSummaryDTO:
    total_items: int
    total_unique_products: int
    cart_total: str


@dataclass(frozen=True)
class CartDTO:
    cart_items: list[CartItemDTO]
    summary: CartSummaryDTO


@dataclass(frozen=True)
class CartLineDTO:
    """Output of add/update: the line as it now stands."""

    cart_id: int
    product_id: int
    product_name: str
    previous_quantity: int
    quantity: int
    unit_price: str
    subtotal: str


@dataclass(frozen=True)
class ClearCartDTO:
    items_removed: int
    total_quantity_removed: int


# --- Orders -------------------------------------------------------------------


@dataclass(frozen=True)
class ShippingDTO:
    address: str
    city: str
    postal_code: str
    full_address: str


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output of checkout."""

    order_id: int
    order_number: str
    subtotal: str
    tax_amount: str
    tax_rate: str
    total_price: str
    status: str
    payment_method: str
    items_count: int
    shipping_info: ShippingDTO


@dataclass(frozen=True)
class OrderLineDTO:
    order_item_id: int | None
    product_id: int
    product_name: str
    quantity: int
    price_at_purchase: str
    subtotal: str


@dataclass(frozen=True)
class StatusHistoryDTO:
    previous_status: str
    new_status: str
    changed_by: int | None
    changed_at: str | None


@dataclass(frozen=True)
class OrderDTO:
    id: int
    order_number: str
    subtotal: str
    tax_amount: str
    tax_rate: str
    total_price: str
    status: str
    status_label: str
    payment_method: str
    payment_status: str
    shipping: ShippingDTO
    item_count: int
    total_quantity: int
    created_at: str | None
    updated_at: str | None
    items: list[OrderLineDTO] = field(default_factory=list)
    status_history: list[StatusHistoryDTO] = field(default_factory=list)


def shipping_to_dto(order: Order) -> ShippingDTO:
    return ShippingDTO(
        address=order.shipping.address,
        city=order.shipping.city,
        postal_code=order.shipping.postal_code,
        full_address=order.shipping.full_address,
    )


def order_to_dto(order: Order, with_items: bool = True) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        subtotal=str(order.subtotal),
        tax_amount=str(order.tax_amount),
        tax_rate=TAX_RATE_LABEL,
        total_price=str(order.total_price),
        status=order.status.value,
        status_label=order.status.label,
        payment_method=order.payment_method.value,
        payment_status=order.payment_status.value,
        shipping=shipping_to_dto(order),
        item_count=order.items_count,
        total_quantity=order.total_quantity,
        created_at=iso(order.created_at),
        updated_at=iso(order.updated_at),
        items=[
            OrderLineDTO(
                order_item_id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                price_at_purchase=str(item.price_at_purchase),
                subtotal=str(item.line_total),
            )
            for item in order.items
        ]
        if with_items
        else [],
        status_history=[
            StatusHistoryDTO(
                previous_status=change.previous_status.value,
                new_status=change.new_status.value,
                changed_by=change.changed_by,
                changed_at=iso(change.changed_at),
            )
            for change in order.status_history
        ]
        if with_items
        else [],
    )


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    pagination: PaginationDTO


@dataclass(frozen=True)
class StatusChangeDTO:
    order_id: int
    order_number: str
    previous_status: str
    new_status: str
    updated_by: int


# --- Users --------------------------------------------------------------------


@dataclass(frozen=True)
class UserDTO:
    id: int
    email: str
    first_name: str
    last_name: str
    phone: str | None
    address: str | None
    city: str | None
    postal_code: str | None
    role: str
    created_at: str | None


def user_to_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,  # type: ignore[arg-type]
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        address=user.address,
        city=user.city,
        postal_code=user.postal_code,
        role=user.role.value,
        created_at=iso(user.created_at),
    )


@dataclass(frozen=True)
class LoginDTO:
    session_token: str
    expires_at: str
    user: UserDTO


@dataclass(frozen=True)
class LogoutDTO:
    logged_out: bool
