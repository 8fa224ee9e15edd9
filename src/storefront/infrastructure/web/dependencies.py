"""FastAPI dependencies: unit of work, settings and the auth gate.

Routes never look at cookies or headers themselves.  They declare
``actor: AuthenticatedUser = Depends(current_user)`` (or
``Depends(require_role(Role.ADMIN))``) and pass the actor on explicitly.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, Request

from storefront.application.current_user import CurrentUserHandler
from storefront.domain.exceptions import PermissionDeniedError
from storefront.domain.model.user import AuthenticatedUser, Role
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.password_hasher import PasswordHasher
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_uow(request: Request) -> UnitOfWork:
    # One unit of work per request; each ``with`` block opens its own session.
    return SqlUnitOfWork(request.app.state.session_factory)


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def session_token(request: Request) -> str | None:
    """Token from the session cookie, or from ``Authorization: Bearer``."""
    token = request.cookies.get(request.app.state.settings.session_cookie_name)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def current_user(
    token: str | None = Depends(session_token),
    uow: UnitOfWork = Depends(get_uow),
) -> AuthenticatedUser:
    return CurrentUserHandler(uow).handle(token)


def require_role(role: Role) -> Callable[..., AuthenticatedUser]:
    def dependency(actor: AuthenticatedUser = Depends(current_user)) -> AuthenticatedUser:
        if actor.role != role:
            raise PermissionDeniedError(
                "Access denied. This action requires administrator privileges."
                if role == Role.ADMIN
                else "Access denied.",
                {"required_role": role.value, "current_role": actor.role.value},
            )
        return actor

    return dependency
