"""SQLAlchemy implementation of UnitOfWork.

Each ``with`` block opens a fresh ORM session (one database transaction)
and binds every repository to it; the session is closed on exit.
"""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.sql_cart_repository import SqlCartRepository
from storefront.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from storefront.infrastructure.persistence.sql_product_repository import (
    SqlCategoryRepository,
    SqlProductRepository,
)
from storefront.infrastructure.persistence.sql_user_repository import (
    SqlSessionRepository,
    SqlUserRepository,
)


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlUnitOfWork:
        if self._session is not None:
            raise RuntimeError("Unit of work is already in use")
        session = self._session_factory()
        self._session = session
        self.products = SqlProductRepository(session)
        self.categories = SqlCategoryRepository(session)
        self.carts = SqlCartRepository(session)
        self.orders = SqlOrderRepository(session)
        self.users = SqlUserRepository(session)
        self.sessions = SqlSessionRepository(session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            if self._session is not None:
                self._session.close()
            self._session = None

    def commit(self) -> None:
        self._require_session().commit()

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Unit of work used outside of a 'with' block")
        return self._session
