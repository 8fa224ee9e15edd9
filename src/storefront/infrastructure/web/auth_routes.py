"""FastAPI routes for registration, login and the current session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from storefront.application.current_user import ShowProfileHandler
from storefront.application.login import LoginHandler, LogoutHandler
from storefront.application.register_user import RegisterUserHandler
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.user import AuthenticatedUser
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.password_hasher import PasswordHasher
from storefront.infrastructure.config import Settings
from storefront.infrastructure.web import envelope
from storefront.infrastructure.web.dependencies import (
    current_user,
    get_hasher,
    get_settings,
    get_uow,
    session_token,
)
from storefront.infrastructure.web.schemas import LoginRequest, RegisterRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
def register(
    request: Request,
    body: RegisterRequest,
    uow: UnitOfWork = Depends(get_uow),
    hasher: PasswordHasher = Depends(get_hasher),
) -> Response:
    handler = RegisterUserHandler(uow, hasher)
    try:
        user = handler.handle(
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            phone=body.phone,
        )
    except ValidationError as exc:
        return envelope.error(request, exc.message, exc.errors, status_code=422)
    return envelope.success(
        request, "Registration successful! You can now log in.", {"user": user}, status_code=201
    )


@router.post("/login")
def login(
    request: Request,
    body: LoginRequest,
    uow: UnitOfWork = Depends(get_uow),
    hasher: PasswordHasher = Depends(get_hasher),
    settings: Settings = Depends(get_settings),
) -> Response:
    handler = LoginHandler(uow, hasher, settings.session_lifetime_seconds)
    result = handler.handle(body.email, body.password)

    response = envelope.success(
        request,
        f"Login successful! Welcome back, {result.user.first_name}!",
        {"user": result.user, "session_id": result.session_token, "expires_at": result.expires_at},
    )
    response.set_cookie(
        settings.session_cookie_name,
        result.session_token,
        max_age=settings.session_lifetime_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return response


@router.post("/logout")
def logout(
    request: Request,
    token: str | None = Depends(session_token),
    uow: UnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_settings),
) -> Response:
    result = LogoutHandler(uow).handle(token)
    response = envelope.success(request, "Logged out successfully.", result)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/me")
def me(
    request: Request,
    actor: AuthenticatedUser = Depends(current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> Response:
    user = ShowProfileHandler(uow).handle(actor)
    return envelope.success(request, "User retrieved successfully.", {"user": user})
