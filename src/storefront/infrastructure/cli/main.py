import click
import uvicorn

from storefront.infrastructure.cli.db_commands import db_init, db_seed
from storefront.infrastructure.cli.order_commands import order_set_status, order_show
from storefront.infrastructure.cli.product_commands import (
    product_list,
    product_set_price,
    product_set_stock,
)
from storefront.infrastructure.cli.user_commands import user_promote
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront: e-commerce backend administration"""
    configure_logging(get_settings())


@cli.group()
def db() -> None:
    """Manage the database."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def user() -> None:
    """Manage user accounts."""


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Restart on code changes.")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API."""
    uvicorn.run(
        "storefront.infrastructure.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


# Register subcommands
db.add_command(db_init)
db.add_command(db_seed)
product.add_command(product_list)
product.add_command(product_set_price)
product.add_command(product_set_stock)
order.add_command(order_show)
order.add_command(order_set_status)
user.add_command(user_promote)
