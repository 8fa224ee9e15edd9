"""CLI commands for the database: schema creation and demo data."""

from __future__ import annotations

from decimal import Decimal

import click

from storefront.domain.model.product import Category, Product
from storefront.domain.model.user import Role, User
from storefront.domain.model.value_objects import Money
from storefront.infrastructure import bootstrap
from storefront.infrastructure.persistence.database import create_schema, drop_schema

_DEMO_CATEGORIES = [
    ("Electronics", "electronics", "Phones, laptops and accessories"),
    ("Books", "books", "Fiction and non-fiction"),
    ("Home & Kitchen", "home-kitchen", "Everything for the home"),
]

# (name, slug, category slug, price, stock, brand, featured, bestseller, new)
_DEMO_PRODUCTS = [
    ("Wireless Headphones", "wireless-headphones", "electronics", "89.99", 25, "Sonic", True, True, False),
    ("USB-C Charger 65W", "usb-c-charger-65w", "electronics", "34.50", 60, "Volt", False, True, False),
    ("Mechanical Keyboard", "mechanical-keyboard", "electronics", "119.00", 10, "Keyco", True, False, True),
    ("The Pragmatic Programmer", "the-pragmatic-programmer", "books", "42.00", 15, None, False, True, False),
    ("Domain-Driven Design", "domain-driven-design", "books", "54.90", 8, None, True, False, False),
    ("Cast Iron Skillet", "cast-iron-skillet", "home-kitchen", "39.95", 30, "Forge", False, False, True),
    ("French Press", "french-press", "home-kitchen", "24.00", 0, "Brewly", False, False, True),
]


@click.command("init")
@click.option("--drop", is_flag=True, help="Drop all tables first (destroys data).")
def db_init(drop: bool) -> None:
    """Create the database tables."""
    engine = bootstrap.engine()
    if drop:
        click.confirm("This deletes every row in the database. Continue?", abort=True)
        drop_schema(engine)
    create_schema(engine)
    click.echo(f"Database ready at {engine.url.render_as_string(hide_password=True)}")


@click.command("seed")
@click.option("--admin-email", default=None, help="Also create an admin account.")
@click.option("--admin-password", default=None, help="Password for the admin account.")
def db_seed(admin_email: str | None, admin_password: str | None) -> None:
    """Load a small demo catalog (and optionally an admin user)."""
    if admin_email and not admin_password:
        raise click.BadParameter("--admin-password is required with --admin-email")

    uow = bootstrap.unit_of_work()
    with uow:
        categories: dict[str, Category] = {}
        for name, slug, description in _DEMO_CATEGORIES:
            category = uow.categories.get_by_slug(slug)
            if category is None:
                category = Category(id=None, name=name, slug=slug, description=description)
                uow.categories.save(category)
            categories[slug] = category

        created = 0
        existing = {p.slug for p in uow.products.list_page(0, 1000)}
        for name, slug, cat, price, stock, brand, featured, bestseller, new in _DEMO_PRODUCTS:
            if slug in existing:
                continue
            uow.products.save(
                Product(
                    id=None,
                    name=name,
                    slug=slug,
                    price=Money(Decimal(price)),
                    stock_quantity=stock,
                    category_id=categories[cat].id,
                    brand=brand,
                    is_featured=featured,
                    is_bestseller=bestseller,
                    is_new=new,
                )
            )
            created += 1

        if admin_email and uow.users.get_by_email(admin_email) is None:
            uow.users.save(
                User(
                    id=None,
                    email=admin_email.strip().lower(),
                    password_hash=bootstrap.password_hasher().hash(admin_password),
                    first_name="Store",
                    last_name="Admin",
                    role=Role.ADMIN,
                )
            )
            click.echo(f"Admin account {admin_email} created")

        uow.commit()

    click.echo(f"Seeded {len(categories)} categories and {created} new products")
