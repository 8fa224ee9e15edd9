"""CLI commands for orders (operator tools)."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.user import AuthenticatedUser
from storefront.infrastructure import bootstrap


def _display_order(dto: OrderDTO) -> None:
    click.echo(f"Order {dto.order_number} (#{dto.id})  status={dto.status}  payment={dto.payment_method}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Ship to:  {dto.shipping.full_address}")
    click.echo()
    click.echo(f"  {'Product':<28} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name[:28]:<28} {item.quantity:>5} "
            f"{item.price_at_purchase:>10} {item.subtotal:>10}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Subtotal':<34} {dto.subtotal:>21}")
    click.echo(f"  {'Tax (' + dto.tax_rate + ')':<34} {dto.tax_amount:>21}")
    click.echo(f"  {'Total':<34} {dto.total_price:>21}")

    if dto.status_history:
        click.echo()
        click.echo("History:")
        for change in dto.status_history:
            click.echo(
                f"  {change.changed_at}  {change.previous_status} -> {change.new_status}"
                f"  (by user #{change.changed_by})"
            )


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show any order with its lines and status history."""
    uow = bootstrap.unit_of_work()
    with uow:
        order = uow.orders.get_by_id(order_id)

    if order is None:
        raise click.ClickException(f"Order #{order_id} not found")
    _display_order(order_to_dto(order))


@click.command("set-status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    help="New status.",
)
@click.option("--admin-email", required=True, help="Admin account recorded as the author.")
def order_set_status(order_id: int, status: str, admin_email: str) -> None:
    """Change an order's status on behalf of an admin."""
    uow = bootstrap.unit_of_work()
    with uow:
        admin = uow.users.get_by_email(admin_email)
    if admin is None:
        raise click.ClickException(f"No user registered with email '{admin_email}'")

    handler = UpdateOrderStatusHandler(uow)
    try:
        change = handler.handle(AuthenticatedUser.from_user(admin), order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Order {change.order_number}: {change.previous_status} -> {change.new_status}"
    )
