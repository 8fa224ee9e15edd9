"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from storefront.application.list_products import ListProductsHandler, MAX_PAGE_SIZE
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure import bootstrap


@click.command("list")
@click.option("--page", default=1, show_default=True, help="Page number.")
@click.option("--category-id", type=int, default=None, help="Only this category.")
def product_list(page: int, category_id: int | None) -> None:
    """List products in the catalog, newest first."""
    result = ListProductsHandler(bootstrap.unit_of_work()).handle(
        page=page, limit=MAX_PAGE_SIZE, category_id=category_id
    )

    if not result.products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<28} {'Category':<16} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 70)
    for p in result.products:
        click.echo(
            f"{p.id:<6} {p.name[:28]:<28} {(p.category.name or '-')[:16]:<16} "
            f"{p.price:>10} {p.stock_quantity:>6}"
        )
    pagination = result.pagination
    click.echo(f"Page {pagination.page}/{max(pagination.total_pages, 1)} ({pagination.total} products)")


@click.command("set-price")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--price", required=True, help="New price (e.g. 29.99).")
def product_set_price(product_id: int, price: str) -> None:
    """Change a product's price. Existing orders keep their price."""
    handler = UpdateProductHandler(bootstrap.unit_of_work())

    try:
        product = handler.handle(product_id=product_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' now costs {product.price}")


@click.command("set-stock")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
def product_set_stock(product_id: int, quantity: int) -> None:
    """Set a product's stock level."""
    handler = UpdateProductHandler(bootstrap.unit_of_work())

    try:
        product = handler.handle(product_id=product_id, stock_quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' stock set to {product.stock_quantity}")
