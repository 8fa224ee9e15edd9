"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from storefront.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork
from storefront.infrastructure.security.passwords import BcryptPasswordHasher


def build_engine(settings: Settings) -> Engine:
    return create_db_engine(settings.database_url, echo=settings.database_echo)


@lru_cache
def _default_engine() -> Engine:
    return build_engine(get_settings())


def engine(settings: Settings | None = None) -> Engine:
    """The process-wide engine for the default settings, or a new one."""
    if settings is None:
        return _default_engine()
    return build_engine(settings)


def session_factory(bind: Engine | None = None) -> sessionmaker[Session]:
    return create_session_factory(bind if bind is not None else engine())


def unit_of_work(factory: sessionmaker[Session] | None = None) -> SqlUnitOfWork:
    return SqlUnitOfWork(factory if factory is not None else session_factory())


def password_hasher(settings: Settings | None = None) -> BcryptPasswordHasher:
    settings = settings or get_settings()
    return BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
