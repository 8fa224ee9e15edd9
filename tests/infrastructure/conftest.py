"""Fixtures for tests that run against a real SQLite database file."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.domain.model.product import Category, Product
from storefront.domain.model.user import Role, User
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.database import (
    create_db_engine,
    create_schema,
    create_session_factory,
)
from storefront.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork
from storefront.infrastructure.web.app import create_app


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def uow(session_factory):
    return SqlUnitOfWork(session_factory)


@pytest.fixture
def seed(session_factory):
    """Insert rows through the SQL repositories and return the domain objects."""

    class Seeder:

        def category(self, name: str, slug: str, is_active: bool = True) -> Category:
            category = Category(id=None, name=name, slug=slug, is_active=is_active)
            with SqlUnitOfWork(session_factory) as uow:
                uow.categories.save(category)
                uow.commit()
            return category

        def product(self, name: str, price: str, stock: int, **fields) -> Product:
            product = Product(
                id=None, name=name, price=Money(Decimal(price)), stock_quantity=stock, **fields
            )
            with SqlUnitOfWork(session_factory) as uow:
                uow.products.save(product)
                uow.commit()
            return product

        def user(self, email: str, role: Role = Role.CUSTOMER) -> User:
            user = User(
                id=None,
                email=email,
                password_hash="not-a-real-hash",
                first_name="Test",
                last_name="User",
                phone="0301234",
                role=role,
            )
            with SqlUnitOfWork(session_factory) as uow:
                uow.users.save(user)
                uow.commit()
            return user

    return Seeder()


@pytest.fixture
def app(tmp_path):
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'api.db'}",
        bcrypt_rounds=4,
        app_name="Storefront Test",
        app_version="9.9.9",
    )
    app = create_app(settings)
    create_schema(app.state.engine)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
